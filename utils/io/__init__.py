from .logger import logger
from .safe import run_safe_command

__all__ = [
    "logger",
    "run_safe_command",
]
