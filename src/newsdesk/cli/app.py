"""Typer app configuration and logging setup."""

from __future__ import annotations

import logging
import warnings

import typer
from dotenv import load_dotenv
from rich.logging import RichHandler

from newsdesk.providers.config import PROJECT_ROOT

# Load environment variables from .env file
load_dotenv()

# httpx clients closed after the loop shuts down emit this on interpreter exit
warnings.filterwarnings("ignore", message=".*Event loop is closed.*")
warnings.filterwarnings("ignore", category=ResourceWarning)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

# Pipeline loggers that write to logs/newsdesk.log
PIPELINE_LOGGERS = ["news", "ai_calls"]

app = typer.Typer(
    name="newsdesk",
    help="Multi-source news ingestion, caching and enrichment",
    add_completion=False,
)


def register_commands() -> None:
    """Register all commands from feature modules."""
    from .news.commands import (
        ask,
        clear,
        enrich,
        headlines,
        pin,
        purge,
        refresh,
        sources,
        top_stories,
        unpin,
    )

    app.command(name="headlines")(headlines)
    app.command(name="refresh")(refresh)
    app.command(name="top-stories")(top_stories)
    app.command(name="enrich")(enrich)
    app.command(name="ask")(ask)
    app.command(name="sources")(sources)
    app.command(name="purge")(purge)
    app.command(name="clear")(clear)
    app.command(name="pin")(pin)
    app.command(name="unpin")(unpin)


def setup_logging() -> None:
    """Configure logging for CLI.

    - Suppresses console output from libraries
    - Sends the pipeline loggers (``news.*`` and ``ai_calls``) to logs/newsdesk.log
    """
    log_dir = PROJECT_ROOT / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(logging.CRITICAL)

    for logger_name in ["httpx", "httpcore", "urllib3", "asyncio", "playwright"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.WARNING)
        logger.propagate = False

    file_handler = logging.FileHandler(log_dir / "newsdesk.log", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    for logger_name in PIPELINE_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.handlers = [file_handler]


def enable_console_logging(level: int = logging.INFO) -> None:
    """Mirror pipeline log lines to the terminal through Rich."""
    from .core.console import console

    handler = RichHandler(console=console, show_path=False, markup=False)
    handler.setLevel(level)
    for logger_name in PIPELINE_LOGGERS:
        logging.getLogger(logger_name).addHandler(handler)


@app.callback()
def root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Echo pipeline logs to the console"),
) -> None:
    """Multi-source news ingestion, caching and enrichment."""
    if verbose:
        enable_console_logging()


# Initialize logging on module import
setup_logging()

# Register all commands
register_commands()


def main() -> None:
    """CLI entry point."""
    app()
