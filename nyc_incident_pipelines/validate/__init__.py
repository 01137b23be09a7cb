# __init__ for validate utils


from .core import run_validation_checks
from .panel_checks import validate_daily_panel, validate_rates

__all__ = [
    "run_validation_checks",
    "validate_daily_panel",
    "validate_rates",
]
