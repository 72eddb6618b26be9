"""Provider factory functions for CLI.

Centralizes creation of the configuration and pipeline from environment
variables. Hides configuration details from command implementations.
"""

import base64
import logging
import mimetypes
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from ..config import ChatweaveConfig
from ..factory import create_pipeline
from ..pipeline import EnrichmentPipeline

# Default console for output
_console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through Rich.

    Args:
        verbose: Show debug output instead of warnings only
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=_console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # SDK clients are chatty at debug level
    for name in ("httpx", "httpcore", "google_genai", "openai"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_config(console: Console | None = None) -> ChatweaveConfig:
    """Load configuration from environment variables.

    Raises:
        SystemExit: If a variable holds an invalid value
    """
    con = console or _console
    try:
        return ChatweaveConfig.from_env()
    except (ValidationError, ValueError) as e:
        con.print(f"[red]Error: invalid configuration: {e}[/red]")
        raise typer.Exit(code=1)


def get_pipeline(console: Console | None = None) -> EnrichmentPipeline:
    """Create a pipeline from environment variables.

    Warns when no text backend is configured; the pipeline still runs and
    reports the missing key in its replies.
    """
    con = console or _console
    config = get_config(con)

    key = config.gemini_api_key if config.llm_provider == "gemini" else config.openai_api_key
    if not key:
        con.print(
            f"[yellow]Warning: no API key set for {config.llm_provider}, "
            f"text generation disabled[/yellow]"
        )

    try:
        return create_pipeline(config)
    except ValueError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def encode_image(path: Path) -> str:
    """Read an image file into a data URL.

    Raises:
        typer.BadParameter: If the file type is not an image
    """
    media_type, _ = mimetypes.guess_type(path.name)
    if not media_type or not media_type.startswith("image/"):
        raise typer.BadParameter(f"{path} does not look like an image")
    data = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{media_type};base64,{data}"
