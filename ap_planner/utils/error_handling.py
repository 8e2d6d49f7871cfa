"""
Input Validation and Logging Setup

This module provides:
- Structured validation error records with severities
- Validation of numeric inputs against min/max constraints
- The placement form checks (coverage area, building length and width)
- Logging configuration shared by the command line and the GUI
"""

import logging
import math
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_HANDLER_NAME = "ap_planner.console"
FILE_HANDLER_NAME = "ap_planner.file"

MSG_NOT_NUMERIC = "Please enter valid numeric values."
MSG_NOT_POSITIVE = "Area and dimension values must be positive."


class LogLevel(Enum):
    """Log levels accepted on the command line."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ValidationError:
    """Structured validation error information."""
    field_name: str
    value: Any
    constraint: str
    severity: ErrorSeverity
    message: str


def setup_logging(level: Union[LogLevel, str] = LogLevel.INFO, log_file: Optional[str] = None):
    """Configure the root logger with a stdout handler and an optional file handler."""
    level_name = level.value if isinstance(level, LogLevel) else str(level).upper()

    formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name))

    # Calling again replaces the handlers from the previous call
    for handler in list(root_logger.handlers):
        if handler.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level_name))
    console_handler.setFormatter(formatter)
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file
        file_handler.setFormatter(formatter)
        file_handler.set_name(FILE_HANDLER_NAME)
        root_logger.addHandler(file_handler)

    logger.info(f"Logging configured - Level: {level_name}, File: {log_file}")


def parse_number(value: Any) -> Optional[float]:
    """Float value of a form field, or None when it is not a finite number."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class InputValidator:
    """
    Records validation problems instead of raising, so a caller can report
    every issue of a form at once.
    """

    def __init__(self):
        self.validation_errors: List[ValidationError] = []

    def validate_input(self, value: Any, field_name: str = "",
                       constraints: Dict[str, Any] = None) -> bool:
        """
        Validate a numeric input.

        Args:
            value: Value to validate (numbers or numeric strings)
            field_name: Name of the field being validated
            constraints: Optional 'min', 'max' and 'exclusive_min' bounds

        Returns:
            True if valid, False otherwise
        """
        number = parse_number(value)
        if number is None:
            self._record(field_name, value, "type", ErrorSeverity.HIGH,
                         f"{field_name or 'Value'} must be a number, got {value!r}")
            return False

        constraints = constraints or {}
        if 'exclusive_min' in constraints and number <= constraints['exclusive_min']:
            self._record(field_name, value, f"exclusive_min={constraints['exclusive_min']}", ErrorSeverity.MEDIUM,
                         f"Value {number} must be greater than {constraints['exclusive_min']}")
            return False
        if 'min' in constraints and number < constraints['min']:
            self._record(field_name, value, f"min={constraints['min']}", ErrorSeverity.MEDIUM,
                         f"Value {number} is below minimum {constraints['min']}")
            return False
        if 'max' in constraints and number > constraints['max']:
            self._record(field_name, value, f"max={constraints['max']}", ErrorSeverity.MEDIUM,
                         f"Value {number} is above maximum {constraints['max']}")
            return False
        return True

    def validate_placement_inputs(self, coverage_area: Any, length: Any, width: Any) -> Tuple[bool, Optional[str]]:
        """
        Form checks run before placement.

        Returns:
            (ok, user-facing message or None)
        """
        fields = {'coverage_area': coverage_area, 'length': length, 'width': width}
        if any(parse_number(v) is None for v in fields.values()):
            for name, value in fields.items():
                self.validate_input(value, name)
            return False, MSG_NOT_NUMERIC

        valid = [self.validate_input(value, name, {'exclusive_min': 0.0}) for name, value in fields.items()]
        if not all(valid):
            return False, MSG_NOT_POSITIVE
        return True, None

    def get_validation_report(self) -> Dict[str, Any]:
        """Counts per severity plus the individual messages."""
        by_severity = {s.value: 0 for s in ErrorSeverity}
        for error in self.validation_errors:
            by_severity[error.severity.value] += 1
        return {
            'total_errors': len(self.validation_errors),
            'by_severity': by_severity,
            'validation_passed': not self.validation_errors,
            'detailed_errors': [
                {'field_name': e.field_name, 'severity': e.severity.value, 'message': e.message}
                for e in self.validation_errors
            ],
        }

    def clear_errors(self):
        self.validation_errors.clear()

    def _record(self, field_name, value, constraint, severity, message):
        error = ValidationError(field_name=field_name, value=value, constraint=constraint,
                                severity=severity, message=message)
        self.validation_errors.append(error)
        logger.warning(f"Validation error: {message}")
