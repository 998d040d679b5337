"""
Bibliography parser module.

Turns BibTeX files into an entry store (citation key -> Entry). The BibTeX
grammar itself is handled by bibtexparser; this module only selects the
requested fields, merges several files and keeps citation keys unique.
"""

import logging
from typing import Iterable, List, Optional

import bibtexparser
from bibtexparser.bparser import BibTexParser

from bib_core.constants import DEFAULT_FIELDS
from bib_core.exceptions import BibliographyLoadError
from bib_core.models import Entry, EntryStore, PARSER_ID_KEY, PARSER_TYPE_KEY

logger = logging.getLogger(__name__)


def _new_parser() -> BibTexParser:
    # BibTexParser keeps state between calls, so each parse gets its own instance
    parser = BibTexParser(common_strings=True)
    parser.ignore_nonstandard_types = False
    return parser


def parse_bibliography(text: str, fields: Optional[Iterable[str]] = None,
                       source: str = "<string>") -> EntryStore:
    """
    Parse BibTeX text into an entry store.

    Args:
        text: BibTeX source
        fields: Field names to keep (the key and entry type are always kept)
        source: Name used in log messages

    Returns:
        Dict mapping citation key to Entry, in file order
    """
    wanted = set(fields if fields is not None else DEFAULT_FIELDS)
    database = bibtexparser.loads(text, parser=_new_parser())

    entries: EntryStore = {}
    for record in database.entries:
        key = record.get(PARSER_ID_KEY)
        if not key:
            logger.warning(f"Skipping entry without a citation key in {source}")
            continue
        if key in entries:
            logger.warning(f"Duplicate citation key '{key}' in {source}, keeping the first")
            continue
        selected = {k: v for k, v in record.items() if k in wanted}
        selected[PARSER_ID_KEY] = key
        selected[PARSER_TYPE_KEY] = record.get(PARSER_TYPE_KEY, "")
        entries[key] = Entry.from_record(selected)

    logger.debug(f"Parsed {len(entries)} entries from {source}")
    return entries


def load_entries(paths: List[str], fields: Optional[Iterable[str]] = None) -> EntryStore:
    """
    Load and merge several bibliography files.

    Unreadable files are logged and skipped. When a key appears in more than
    one file the first occurrence wins.

    Raises:
        BibliographyLoadError: if no file could be read
    """
    fields = list(fields) if fields is not None else list(DEFAULT_FIELDS)
    entries: EntryStore = {}
    loaded = 0

    for path in paths:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                text = f.read()
        except OSError as e:
            logger.error(f"Error reading bibliography file '{path}': {e}")
            continue

        loaded += 1
        for key, entry in parse_bibliography(text, fields, source=path).items():
            if key in entries:
                logger.warning(f"Citation key '{key}' in {path} already loaded, keeping the first")
                continue
            entries[key] = entry

    if paths and not loaded:
        raise BibliographyLoadError(f"Could not read any bibliography file: {', '.join(paths)}")

    logger.debug(f"Loaded {len(entries)} entries from {loaded} file(s)")
    return entries
