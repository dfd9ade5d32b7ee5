from .json import CustomJsonFormatter, RedactingFilter, SensitiveDataFilter, configure_logging
from .logger import get_logger

__all__ = [
    "CustomJsonFormatter",
    "RedactingFilter",
    "SensitiveDataFilter",
    "configure_logging",
    "get_logger",
]
