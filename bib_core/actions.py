"""
Bibliography actions.

Each action loads the bibliographies, builds a fresh display index, lets
the user choose one entry and then does one thing with it:

- note: open the entry's note, creating it from a template if missing
- cite: insert a citation for the entry at the editor's cursor
- open: launch the entry's document with the configured opener

Nothing is cached between calls. A cancelled selection returns None and
has no side effects.
"""

import os
import logging
from typing import Callable, Dict, List, Optional

from bib_core.bibliography.index import build_index
from bib_core.bibliography.parser import load_entries
from bib_core.bibliography.selector import Chooser, select, DEFAULT_PROMPT
from bib_core.commands import CommandExecutor, OpenerTask
from bib_core.config import BibConfig, with_overrides
from bib_core.constants import (
    DOCUMENT_EXTENSIONS, FALLBACK_CITE_FORMAT, ENTRY_TYPE_FIELD, CITATION_KEY_FIELD
)
from bib_core.exceptions import DocumentNotFound, NoteError
from bib_core.host import Host
from bib_core.models import Entry

logger = logging.getLogger(__name__)

NOTE_TEMPLATE = """* {title}
  :PROPERTIES:
  :AUTHOR: {author}
  :CUSTOM_ID: {key}
  :END:

"""

MODE_ALIASES = {
    "tex": "latex",
    "plaintex": "latex",
    "context": "latex",
}

Spawner = Callable[[List[str], str], OpenerTask]


# --- Shared pipeline ---

def fields_to_extract(config: BibConfig) -> List[str]:
    fields = list(config.fields)
    for name in (config.search_field, config.annotation_field):
        if name not in fields and name not in (ENTRY_TYPE_FIELD, CITATION_KEY_FIELD):
            fields.append(name)
    return fields


def lookup(config: BibConfig, chooser: Chooser, prompt: str = DEFAULT_PROMPT) -> Optional[Entry]:
    """Load the bibliographies, build the display index and select one entry."""
    entries = load_entries(config.bibliography_files, fields_to_extract(config))
    index = build_index(entries, config.search_field)
    return select(index, config.annotation_field, chooser, prompt)


# --- Note ---

def note_path(config: BibConfig, key: str) -> str:
    """Path of the note for ``key``."""
    return os.path.join(config.notes_dir, f"{key}{config.note_extension}")


def note_template(entry: Entry) -> str:
    """Initial content of a new note."""
    return NOTE_TEMPLATE.format(title=entry.title, author=entry.author, key=entry.key)


def ensure_note(config: BibConfig, entry: Entry) -> str:
    """
    Create the note for ``entry`` unless it already exists.

    Existing notes are never rewritten.

    Returns:
        Path of the note

    Raises:
        NoteError: if the notes directory or the note cannot be written
    """
    path = note_path(config, entry.key)
    try:
        os.makedirs(config.notes_dir, exist_ok=True)
        with open(path, "x", encoding="utf-8") as f:
            f.write(note_template(entry))
        logger.info(f"Created note {path}")
    except FileExistsError:
        logger.debug(f"Note {path} already exists")
    except OSError as e:
        raise NoteError(f"Unable to create note {path}: {e}") from e
    return path


def note(config: BibConfig, chooser: Chooser, host: Host,
         search: Optional[str] = None, annotation: Optional[str] = None) -> Optional[str]:
    """
    Open the note of the chosen entry, creating it if needed.

    Returns:
        Path of the note, or None if the selection was cancelled or the
        chosen entry has no key
    """
    config = with_overrides(config, search=search, annotation=annotation)
    entry = lookup(config, chooser, prompt="Note: ")
    if entry is None:
        return None
    if not entry.key:
        logger.warning("Selected entry has no citation key, not creating a note")
        return None

    path = ensure_note(config, entry)
    host.open_file(path)
    return path


# --- Cite ---

def normalize_mode(mode: Optional[str]) -> Optional[str]:
    """Map an editor mode or filetype name to a citation format name."""
    if not mode:
        return None
    mode = mode.lower()
    if mode.endswith("-mode"):
        mode = mode[:-len("-mode")]
    return MODE_ALIASES.get(mode, mode)


def cite_format(mode: Optional[str], formats: Dict[str, str]) -> str:
    """Pick the citation format for ``mode``; unknown modes get the bare key."""
    return formats.get(normalize_mode(mode), FALLBACK_CITE_FORMAT)


def format_citation(key: str, mode: Optional[str], formats: Dict[str, str]) -> str:
    return cite_format(mode, formats).format(key=key)


def cite(config: BibConfig, chooser: Chooser, host: Host,
         search: Optional[str] = None, annotation: Optional[str] = None,
         mode: Optional[str] = None) -> Optional[str]:
    """
    Insert a citation for the chosen entry at the host's cursor.

    Args:
        mode: Document mode; when None the host is asked for it

    Returns:
        The inserted text, or None if the selection was cancelled
    """
    config = with_overrides(config, search=search, annotation=annotation)
    entry = lookup(config, chooser, prompt="Cite: ")
    if entry is None:
        return None

    if mode is None:
        mode = host.mode
    citation = format_citation(entry.key, mode, config.cite_formats)
    logger.debug(f"Inserting {citation!r} (mode: {mode})")
    host.insert_text(citation)
    return citation


# --- Open ---

def find_document(documents_dir: str, key: str) -> str:
    """
    Find the document for ``key``, trying pdf, epub, doc and docx in that order.

    Raises:
        DocumentNotFound: if no candidate file exists
    """
    for extension in DOCUMENT_EXTENSIONS:
        path = os.path.join(documents_dir, f"{key}.{extension}")
        if os.path.isfile(path):
            return path
    raise DocumentNotFound(key, documents_dir)


def open_document(config: BibConfig, chooser: Chooser,
                  search: Optional[str] = None, annotation: Optional[str] = None,
                  spawn: Optional[Spawner] = None) -> Optional[OpenerTask]:
    """
    Open the document of the chosen entry with the configured opener.

    The opener is not waited for; its output goes to the opener log.

    Returns:
        The running opener task, or None if the selection was cancelled

    Raises:
        DocumentNotFound: if the entry has no document
    """
    config = with_overrides(config, search=search, annotation=annotation)
    entry = lookup(config, chooser, prompt="Open: ")
    if entry is None:
        return None

    path = find_document(config.documents_dir, entry.key)
    spawn = spawn or CommandExecutor.spawn
    cmd = list(config.opener) + [path]
    logger.info(f"Opening {path}")
    return spawn(cmd, config.logging.opener_log)
