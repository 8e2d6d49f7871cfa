#!/usr/bin/env python3
"""
AP Plan Editor GUI
Automatic grid placement plus manual AP marking on an uploaded floor plan:
click to add, drag to move, double-click to delete.
"""

import tkinter as tk
from tkinter import ttk, filedialog, messagebox
import base64
import logging
import os
import sys

from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

# Add project root to path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from ap_planner.geometry.coordinate_mapper import UNAVAILABLE
from ap_planner.geometry.coordinates import BuildingDimensions, DisplayPoint
from ap_planner.interaction.controller import InteractionController, PointerSource
from ap_planner.placement.grid_tiling import calculate_ap_placement, radius_from_coverage_area, visualization_radius
from ap_planner.plan_image import PlanImageError, encode_png, fit_to_width, load_plan_image
from ap_planner.reporting.tables import export_tables, manual_placement_table, placement_table
from ap_planner.utils.error_handling import InputValidator, parse_number, setup_logging
from ap_planner.visualization.placement_visualizer import PlacementVisualizer

logger = logging.getLogger(__name__)

MARKER_RADIUS = 6


class TkPointerSource(PointerSource):
    """Binds pointer motion on the canvas only while a drag is in progress."""

    def __init__(self, canvas):
        self.canvas = canvas
        self._on_up = None

    def attach(self, on_move, on_up):
        self.canvas.bind("<B1-Motion>", lambda e: on_move(DisplayPoint(e.x, e.y)))
        self._on_up = on_up

        def release():
            self.canvas.unbind("<B1-Motion>")
            self._on_up = None
        return release

    def deliver_up(self, event):
        if self._on_up is not None:
            self._on_up(DisplayPoint(event.x, event.y))


class PlanCanvas:
    """Plan image with manual AP markers and coverage circles"""

    def __init__(self, parent, controller_owner, width=700, height=500):
        self.canvas = tk.Canvas(parent, width=width, height=height, bg='white', bd=0,
                                highlightthickness=0, cursor='crosshair')
        self.canvas.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        self.owner = controller_owner
        self.pointer_source = TkPointerSource(self.canvas)
        self.controller = InteractionController(pointer_source=self.pointer_source,
                                                on_change=lambda aps: self.redraw())
        self.image = None
        self.photo = None
        self._press_target = None

        self.canvas.bind("<Button-1>", self.on_press)
        self.canvas.bind("<ButtonRelease-1>", self.on_release)
        self.canvas.bind("<Double-Button-1>", self.on_double_click)
        self.canvas.bind("<Configure>", lambda e: self.render_image())
        self.canvas.bind("<FocusOut>", lambda e: self.controller.cancel_drag())

    def load_image(self, path):
        self.image, metadata = load_plan_image(path)
        self.controller.load_image(metadata.width, metadata.height)
        self.render_image()

    def render_image(self):
        """Scale the plan to the canvas and tell the controller the displayed size"""
        self.canvas.delete("plan")
        if self.image is None:
            return
        width = max(self.canvas.winfo_width(), 1)
        height = max(self.canvas.winfo_height(), 1)
        shown = fit_to_width(self.image, width, height)
        self.photo = tk.PhotoImage(data=base64.b64encode(encode_png(shown)))
        self.canvas.create_image(0, 0, image=self.photo, anchor=tk.NW, tags="plan")
        self.canvas.tag_lower("plan")
        self.controller.set_display_size(shown.shape[1], shown.shape[0])
        self.redraw()

    def redraw(self):
        """Redraw markers and coverage circles from the controller's AP list"""
        self.canvas.delete("ap")
        radius = self.controller.coverage_radius_display(self.owner.coverage_radius())
        drag = self.controller.drag
        for i, center in enumerate(self.controller.display_positions()):
            if center is UNAVAILABLE:
                continue
            tag = f"ap-{i}"
            if radius is not UNAVAILABLE and radius > 0:
                self.canvas.create_oval(center.x - radius, center.y - radius, center.x + radius, center.y + radius,
                                        fill='', outline='#10b981', dash=(3, 2), tags=("ap", "coverage"))
            r = MARKER_RADIUS + (2 if drag is not None and drag.index == i else 0)
            self.canvas.create_oval(center.x - r, center.y - r, center.x + r, center.y + r,
                                    fill='#ef4444', outline='white', width=1.5, tags=("ap", "marker", tag))
            self.canvas.create_text(center.x + r + 4, center.y - r - 4, text=f"AP{i + 1}", anchor=tk.W,
                                    fill='black', font=('Arial', 9, 'bold'), tags=("ap", "marker", tag))
        self.owner.update_manual_status(len(self.controller.aps))

    def marker_at(self, x, y):
        """Index of the AP marker under (x, y), if any"""
        for item in reversed(self.canvas.find_overlapping(x - 1, y - 1, x + 1, y + 1)):
            for tag in self.canvas.gettags(item):
                if tag.startswith("ap-"):
                    return int(tag[3:])
        return None

    def on_press(self, event):
        self.canvas.focus_set()
        self._press_target = self.marker_at(event.x, event.y)
        if self._press_target is not None:
            self.controller.pointer_down(DisplayPoint(event.x, event.y), self._press_target)
            self.canvas.config(cursor='fleur')

    def on_release(self, event):
        self.pointer_source.deliver_up(event)
        self.canvas.config(cursor='crosshair')
        # Tk has no click event; a press/release pair on the canvas is one
        self.controller.click(DisplayPoint(event.x, event.y), self._press_target)
        self._press_target = None

    def on_double_click(self, event):
        # Tk sends this in place of the second press; the release after it must not add an AP
        self._press_target = self.marker_at(event.x, event.y)
        self.controller.double_click(DisplayPoint(event.x, event.y), self._press_target)


class PlanEditorGUI:
    """AP plan editor main window"""

    def __init__(self):
        self.root = tk.Tk()
        self.root.title("AP Plan Editor")
        self.root.geometry("1400x850")

        self.visualizer = PlacementVisualizer()
        self.result = None
        self.building = None
        self.setup_ui()

    def setup_ui(self):
        """Setup UI"""
        self.setup_parameters(self.root)

        main_paned = ttk.PanedWindow(self.root, orient=tk.HORIZONTAL)
        main_paned.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        left_frame = ttk.LabelFrame(main_paned, text="Floor Plan (click: add, drag: move, double-click: delete)")
        main_paned.add(left_frame, weight=1)
        right_frame = ttk.LabelFrame(main_paned, text="Automatic Placement")
        main_paned.add(right_frame, weight=1)

        self.plan = PlanCanvas(left_frame, self)

        self.figure = Figure(figsize=(7, 5), dpi=90)
        self.figure_canvas = FigureCanvasTkAgg(self.figure, right_frame)
        self.figure_canvas.get_tk_widget().pack(fill=tk.BOTH, expand=True)

        self.status = tk.StringVar(value="Enter building parameters and calculate, or load a plan image.")
        ttk.Label(self.root, textvariable=self.status, anchor=tk.W).pack(fill=tk.X, padx=5, pady=2)

    def setup_parameters(self, parent):
        """Setup parameter entries and actions"""
        toolbar = ttk.Frame(parent)
        toolbar.pack(fill=tk.X, padx=5, pady=5)

        self.area_var = tk.StringVar(value="200")
        self.length_var = tk.StringVar(value="50")
        self.width_var = tk.StringVar(value="30")
        for text, var in [("Coverage area per AP (m²):", self.area_var),
                          ("Length (m):", self.length_var),
                          ("Width (m):", self.width_var)]:
            ttk.Label(toolbar, text=text).pack(side=tk.LEFT, padx=2)
            entry = ttk.Entry(toolbar, textvariable=var, width=8)
            entry.pack(side=tk.LEFT, padx=4)
            entry.bind("<FocusOut>", lambda e: self.on_parameters_changed())

        ttk.Button(toolbar, text="Calculate", command=self.calculate).pack(side=tk.LEFT, padx=8)
        ttk.Button(toolbar, text="Export Report", command=self.export_report).pack(side=tk.RIGHT, padx=2)
        ttk.Button(toolbar, text="Clear All", command=self.clear_all).pack(side=tk.RIGHT, padx=2)
        ttk.Button(toolbar, text="Clear APs", command=self.clear_manual_aps).pack(side=tk.RIGHT, padx=2)
        ttk.Button(toolbar, text="Load Plan", command=self.load_plan).pack(side=tk.RIGHT, padx=2)

    def coverage_radius(self):
        return visualization_radius(parse_number(self.area_var.get()))

    def on_parameters_changed(self):
        length = parse_number(self.length_var.get())
        self.plan.controller.set_building_length(length if length and length > 0 else 0.0)
        self.plan.redraw()

    def update_manual_status(self, count):
        self.status.set(f"Manual APs: {count}")

    def calculate(self):
        """Run grid placement and draw it"""
        validator = InputValidator()
        ok, message = validator.validate_placement_inputs(self.area_var.get(), self.length_var.get(),
                                                          self.width_var.get())
        if not ok:
            messagebox.showerror("Invalid input", message)
            return

        area = parse_number(self.area_var.get())
        self.building = BuildingDimensions(parse_number(self.length_var.get()), parse_number(self.width_var.get()))
        radius = radius_from_coverage_area(area)
        result = calculate_ap_placement(radius, self.building.length, self.building.width)
        if result.is_empty:
            messagebox.showerror("Placement", result.message)
            return
        if result.message:
            messagebox.showwarning("Placement", result.message)

        self.result = result
        self.figure.clear()
        ax = self.figure.add_subplot(111)
        self.visualizer.draw_building_placement(ax, self.building, result, radius, self.plan.image)
        self.figure_canvas.draw()
        self.on_parameters_changed()
        self.status.set(f"Placed {result.count} APs")

    def load_plan(self):
        filename = filedialog.askopenfilename(filetypes=[("Images", "*.png *.jpg *.jpeg"), ("All files", "*.*")])
        if not filename:
            return
        try:
            self.plan.load_image(filename)
        except PlanImageError as e:
            messagebox.showerror("Error", f"Load failed: {e}")
            return
        logger.info(f"Loaded plan {filename}")
        self.on_parameters_changed()

    def clear_manual_aps(self):
        self.plan.controller.clear_aps()

    def clear_all(self):
        self.plan.controller.unload_image()
        self.plan.image = None
        self.plan.render_image()
        self.result = None
        self.figure.clear()
        self.figure_canvas.draw()

    def export_report(self):
        """Save placement tables and plots to a directory"""
        controller = self.plan.controller
        if self.result is None and not controller.aps:
            messagebox.showwarning("Export", "Calculate a placement or mark at least one AP first.")
            return
        directory = filedialog.askdirectory()
        if not directory:
            return

        tables = {}
        if self.result is not None:
            tables['placement'] = placement_table(self.result)
            self.visualizer.plot_building_placement(self.building, self.result, self.coverage_radius(),
                                                    os.path.join(directory, 'placement.png'), self.plan.image)
        if controller.aps and self.plan.image is not None:
            tables['manual_placement'] = manual_placement_table(controller.aps, controller.mapper)
            self.visualizer.plot_manual_placement(self.plan.image, controller.aps, controller.mapper,
                                                  self.coverage_radius(),
                                                  os.path.join(directory, 'manual_placement.png'))
        try:
            export_tables(tables, directory)
        except OSError as e:
            messagebox.showerror("Error", f"Export failed: {e}")
            return
        messagebox.showinfo("Success", f"Report saved to {directory}")

    def run(self):
        """Run the app"""
        self.root.mainloop()


def main():
    setup_logging()
    PlanEditorGUI().run()


if __name__ == "__main__":
    main()
