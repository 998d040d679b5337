"""
Command-line interface for the bibliography tools.

Commands:
    bib note   open (or create) the note of an entry
    bib cite   insert a citation for an entry into the editor
    bib open   open the document of an entry
    bib list   print the display index
"""

import os
import logging
from pathlib import Path
from typing import Optional

import typer

from bib_core import actions
from bib_core.bibliography.index import build_index, annotation_for
from bib_core.bibliography.parser import load_entries
from bib_core.bibliography.selector import FzfChooser
from bib_core.config import BibConfig, load_config, setup_logging, with_overrides
from bib_core.constants import LABEL_SEPARATOR
from bib_core.exceptions import BibError
from bib_core.host import Host, NvimHost, TmuxHost

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)

app = typer.Typer(help="Look up bibliography entries and act on the chosen one.")

SEARCH_HELP = "Field shown in the selection list (default: title)"
ANNOTATION_HELP = "Field shown beside each entry (default: author)"
CONFIG_HELP = "Path to config file (default: ~/.config/bib_scripts/config.yaml)"


def _load(config_file: Optional[Path], debug: bool) -> BibConfig:
    config = load_config(str(config_file) if config_file else None)
    setup_logging(config, debug)
    return config


def _host(config: BibConfig, socket_path: Optional[str], mode: Optional[str] = None) -> Host:
    """Neovim if a socket is known, otherwise tmux."""
    socket_path = socket_path or config.socket_path or os.getenv("NVIM_SOCKET")
    if socket_path:
        logger.debug(f"Using Neovim host at {socket_path}")
        return NvimHost(socket_path)
    logger.debug("Using tmux host")
    return TmuxHost(mode=mode)


def _fail(error: Exception) -> None:
    logger.error(str(error))
    raise typer.Exit(1)


@app.command()
def note(
    search: Optional[str] = typer.Option(None, "--search", "-s", help=SEARCH_HELP),
    annotation: Optional[str] = typer.Option(None, "--annotation", "-a", help=ANNOTATION_HELP),
    socket_path: Optional[str] = typer.Option(None, "--socket", help="Neovim socket to open the note in"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP,
                                               exists=False, file_okay=True, dir_okay=False),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Open the note of an entry, creating it if it does not exist."""
    config = _load(config_file, debug)
    try:
        path = actions.note(config, FzfChooser(), _host(config, socket_path), search, annotation)
    except BibError as e:
        _fail(e)
    if path:
        logger.debug(f"Opened note {path}")


@app.command()
def cite(
    search: Optional[str] = typer.Option(None, "--search", "-s", help=SEARCH_HELP),
    annotation: Optional[str] = typer.Option(None, "--annotation", "-a", help=ANNOTATION_HELP),
    mode: Optional[str] = typer.Option(None, "--mode", "-m",
                                       help="Document mode (latex, org); asked from Neovim if omitted"),
    socket_path: Optional[str] = typer.Option(None, "--socket", help="Neovim socket to insert into"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP,
                                               exists=False, file_okay=True, dir_okay=False),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Insert a citation for an entry at the editor's cursor."""
    config = _load(config_file, debug)
    try:
        actions.cite(config, FzfChooser(), _host(config, socket_path, mode), search, annotation, mode)
    except BibError as e:
        _fail(e)


@app.command("open")
def open_(
    search: Optional[str] = typer.Option(None, "--search", "-s", help=SEARCH_HELP),
    annotation: Optional[str] = typer.Option(None, "--annotation", "-a", help=ANNOTATION_HELP),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP,
                                               exists=False, file_okay=True, dir_okay=False),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Open the document (pdf, epub, doc, docx) of an entry."""
    config = _load(config_file, debug)
    try:
        actions.open_document(config, FzfChooser(), search, annotation)
    except BibError as e:
        _fail(e)


@app.command("list")
def list_entries(
    search: Optional[str] = typer.Option(None, "--search", "-s", help=SEARCH_HELP),
    annotation: Optional[str] = typer.Option(None, "--annotation", "-a", help=ANNOTATION_HELP),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_HELP,
                                               exists=False, file_okay=True, dir_okay=False),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """Print every display label with its annotation."""
    config = with_overrides(_load(config_file, debug), search=search, annotation=annotation)
    try:
        entries = load_entries(config.bibliography_files, actions.fields_to_extract(config))
    except BibError as e:
        _fail(e)
    index = build_index(entries, config.search_field)
    for label in index:
        print(f"{label}{LABEL_SEPARATOR}{annotation_for(index, label, config.annotation_field)}")


def main() -> None:
    """Entry point for the bib script."""
    app()


if __name__ == "__main__":
    main()
