"""
Display index module.

Builds the mapping from fixed-width display labels to entries. A label is
the search field (55 columns), the entry type (8 columns) and the citation
key, tab separated. The key is never truncated, so labels stay unique as
long as citation keys are.
"""

import logging
from typing import Optional

from bib_core.constants import (
    DEFAULT_SEARCH_FIELD, SEARCH_FIELD_WIDTH, ENTRY_TYPE_WIDTH, ENTRY_TYPE_PAD,
    ANNOTATION_WIDTH, LABEL_SEPARATOR
)
from bib_core.models import Entry, EntryStore, DisplayIndex

logger = logging.getLogger(__name__)


def trim(s: Optional[str], n: int) -> str:
    """Return at most the first ``n`` characters of ``s``."""
    if s is None:
        return ""
    return s[:min(len(s), n)]


def _field(entry: Entry, field_name: str) -> str:
    try:
        return entry.get_field(field_name) or ""
    except Exception as e:
        logger.debug(f"Could not read '{field_name}' from {entry.key}: {e}")
        return ""


def format_label(entry: Entry, search_field: str = DEFAULT_SEARCH_FIELD) -> str:
    """Build the display label for one entry."""
    search = trim(_field(entry, search_field), SEARCH_FIELD_WIDTH).ljust(SEARCH_FIELD_WIDTH)
    entry_type = trim(entry.entry_type, ENTRY_TYPE_WIDTH).ljust(ENTRY_TYPE_PAD)
    return LABEL_SEPARATOR.join([search, entry_type, entry.key])


def build_index(entries: EntryStore, search_field: str = DEFAULT_SEARCH_FIELD) -> DisplayIndex:
    """
    Build the display index for an entry store.

    Args:
        entries: Citation key -> Entry
        search_field: Field shown in the first label column

    Returns:
        Display label -> Entry, in entry store order
    """
    index: DisplayIndex = {}
    for entry in entries.values():
        index[format_label(entry, search_field)] = entry
    logger.debug(f"Built display index with {len(index)} labels (search field: {search_field})")
    return index


def annotation_for(index: DisplayIndex, label: str, annotation_field: str) -> str:
    """Return the annotation shown beside ``label``; unknown labels get an empty string."""
    entry = index.get(label)
    if entry is None:
        return ""
    return trim(_field(entry, annotation_field), ANNOTATION_WIDTH)
