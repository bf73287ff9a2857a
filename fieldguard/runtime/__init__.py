"""Runtime helpers - process-wide validators and argument validation."""

from .arguments import check_parameter_names, format_violation_reason, validate_arguments
from .instances import (
    DEFAULT_INSTANCE,
    configure_validator,
    get_validator,
    shutdown_all_validators,
    shutdown_validator,
)

__all__ = [
    "DEFAULT_INSTANCE",
    "check_parameter_names",
    "configure_validator",
    "format_violation_reason",
    "get_validator",
    "shutdown_all_validators",
    "shutdown_validator",
    "validate_arguments",
]
