# Placement plots: building footprint with AP coverage, and manual APs over a plan image
import logging
import os
from typing import Optional, Sequence

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
import numpy as np
from matplotlib import patheffects
from matplotlib.patches import Circle, Rectangle

from ap_planner.geometry.coordinate_mapper import UNAVAILABLE, CoordinateMapper
from ap_planner.geometry.coordinates import BuildingDimensions, NaturalPoint, OptimizationResult

logger = logging.getLogger(__name__)


class PlacementVisualizer:
    def __init__(self, figsize=(12, 8), dpi=100):
        self.figsize = figsize
        self.dpi = dpi
        self.colors = {
            'building_fill': (191 / 255, 219 / 255, 254 / 255, 0.5),
            'building_edge': '#60a5fa',
            'coverage_fill': (52 / 255, 211 / 255, 153 / 255, 0.25),
            'coverage_edge': (16 / 255, 185 / 255, 129 / 255, 0.6),
            'ap': '#ef4444',
            'label': '#1f2937',
        }

    def plot_building_placement(self, building: BuildingDimensions, result: OptimizationResult,
                                coverage_radius: float, output_path: str,
                                plan_image: Optional[np.ndarray] = None, title: Optional[str] = None):
        """
        Draw the footprint (or the plan stretched over it), coverage circles and AP labels.

        The plan image is stretched to the building's length x width, so it is
        distorted when the aspect ratios differ.
        """
        if not building.is_valid:
            logger.warning("Building dimensions invalid; skipping placement plot")
            return None

        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        self.draw_building_placement(ax, building, result, coverage_radius, plan_image, title)
        if result.message:
            fig.text(0.5, 0.01, result.message, ha='center', fontsize=8, wrap=True)
        return self._save(fig, output_path)

    def draw_building_placement(self, ax, building: BuildingDimensions, result: OptimizationResult,
                                coverage_radius: float, plan_image: Optional[np.ndarray] = None,
                                title: Optional[str] = None):
        """Draw onto an existing axes; also used by the GUI's embedded figure."""
        if plan_image is not None:
            ax.imshow(plan_image, extent=(0, building.length, building.width, 0), aspect='auto', zorder=0)
        else:
            ax.add_patch(Rectangle((0, 0), building.length, building.width,
                                   facecolor=self.colors['building_fill'],
                                   edgecolor=self.colors['building_edge'], linewidth=2, zorder=0))

        for i, ap in enumerate(result.coordinates):
            self._draw_ap(ax, ap.x, ap.y, coverage_radius, f"AP{i + 1}", label_offset=building.length * 0.012)

        ax.set_xlim(-0.05 * building.length, 1.05 * building.length)
        ax.set_ylim(1.05 * building.width, -0.05 * building.width)  # origin at top-left
        ax.set_aspect('equal')
        ax.set_xlabel(f'Length: {building.length:.2f} m')
        ax.set_ylabel(f'Width: {building.width:.2f} m')
        ax.set_title(title or f'AP Placement ({result.count} APs)')

    def plot_manual_placement(self, plan_image: np.ndarray, aps: Sequence[NaturalPoint],
                              mapper: CoordinateMapper, coverage_radius: float, output_path: str):
        """Manual APs in natural-pixel space over the plan image."""
        fig, ax = plt.subplots(figsize=self.figsize, dpi=self.dpi)
        ax.imshow(plan_image, zorder=0)

        radius_px = mapper.radius_to_natural(coverage_radius)
        if radius_px is UNAVAILABLE:
            logger.info("Plan scale unavailable; coverage circles omitted")
            radius_px = 0.0

        height, width = plan_image.shape[:2]
        for i, ap in enumerate(aps):
            self._draw_ap(ax, ap.x, ap.y, radius_px, f"AP{i + 1}", label_offset=width * 0.012)

        ax.set_xlim(0, width)
        ax.set_ylim(height, 0)
        ax.set_axis_off()
        ax.set_title(f'Manual AP Placement ({len(aps)} APs)')
        return self._save(fig, output_path)

    def _draw_ap(self, ax, x, y, radius, label, label_offset):
        if radius and radius > 0:
            ax.add_patch(Circle((x, y), radius, facecolor=self.colors['coverage_fill'],
                                edgecolor=self.colors['coverage_edge'], linewidth=1.5,
                                linestyle='--', zorder=2))
        ax.plot(x, y, 'o', color=self.colors['ap'], markersize=8, markeredgecolor='white',
                markeredgewidth=1.5, zorder=3)
        ax.text(x + label_offset, y + label_offset, label, fontsize=10, fontweight='bold',
                color=self.colors['label'], zorder=4,
                path_effects=[patheffects.withStroke(linewidth=2, foreground='white')])

    def _save(self, fig, output_path):
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        fig.savefig(output_path, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"Saved plot to {output_path}")
        return output_path
