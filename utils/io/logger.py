import logging
from typing import Optional

from rich.console import Console

# stdout carries the MCP protocol frames, so console output goes to stderr
console = Console(stderr=True)

logger_instance = logging.getLogger("merge_review")


def _configure_file_logging() -> None:
    """Attach the persistent file handler once, as configured in settings."""
    from config import settings

    logger_instance.setLevel(settings.log_level.upper())
    if not settings.log_file or logger_instance.handlers:
        return

    file_handler = logging.FileHandler(settings.log_file)
    file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    logger_instance.addHandler(file_handler)


class SystemLogger:
    """
    Centralized logger for the Merge Review server.
    Respects the quiet setting and provides consistent styling and file persistence.
    """

    @staticmethod
    def _is_quiet() -> bool:
        from config import settings

        return settings.quiet

    @staticmethod
    def info(msg: str):
        """Log info - writes to file and console (unless quiet mode)."""
        logger_instance.info(msg)
        if not SystemLogger._is_quiet():
            console.print(f"[dim]INFO:[/dim] {msg}")

    @staticmethod
    def debug(msg: str):
        """Debug log - shows in console if not quiet, always goes to file."""
        logger_instance.debug(msg)
        if not SystemLogger._is_quiet():
            console.print(f"[dim]{msg}[/dim]")

    @staticmethod
    def success(msg: str):
        """Success log - shows in console with green checkmark."""
        logger_instance.info(f"SUCCESS: {msg}")
        if not SystemLogger._is_quiet():
            console.print(f"[green]✓ {msg}[/green]")

    @staticmethod
    def warning(msg: str):
        """Warning log - always shows in console."""
        logger_instance.warning(msg)
        console.print(f"[yellow]⚠ WARNING:[/yellow] {msg}")

    @staticmethod
    def error(msg: str, detail: Optional[str] = None):
        """Error log - always shows in console."""
        if detail:
            logger_instance.error(f"{msg} - {detail}")
        else:
            logger_instance.error(msg)
        console.print(f"[bold red]✗ ERROR:[/bold red] {msg}")
        if detail and not SystemLogger._is_quiet():
            console.print(f"[dim red]  {detail}[/dim red]")

    @staticmethod
    def setup():
        """(Re)attach handlers after settings have been loaded."""
        for handler in list(logger_instance.handlers):
            logger_instance.removeHandler(handler)
            handler.close()
        _configure_file_logging()


# Global singleton
logger = SystemLogger()
