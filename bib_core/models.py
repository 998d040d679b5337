"""Data models for bib_core."""

from dataclasses import dataclass, field
from typing import Dict, Any

from bib_core.constants import ENTRY_TYPE_FIELD, CITATION_KEY_FIELD

# Parser record keys for the two pseudo-fields
PARSER_TYPE_KEY = "ENTRYTYPE"
PARSER_ID_KEY = "ID"

_FIELD_ALIASES = {
    ENTRY_TYPE_FIELD: "entry_type",
    PARSER_TYPE_KEY: "entry_type",
    CITATION_KEY_FIELD: "key",
    PARSER_ID_KEY: "key",
}


def _clean(value: Any) -> str:
    """Collapse whitespace runs so a value always fits on one line."""
    if value is None:
        return ""
    return " ".join(str(value).split())


@dataclass(frozen=True)
class Entry:
    """A single bibliographic record, identified by its citation key."""
    key: str = ""
    entry_type: str = ""
    title: str = ""
    author: str = ""
    year: str = ""
    extra_fields: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Entry':
        """Create an Entry from a parser record (``ID``/``ENTRYTYPE`` plus fields)."""
        standard_fields = {'title', 'author', 'year', PARSER_ID_KEY, PARSER_TYPE_KEY,
                           ENTRY_TYPE_FIELD, CITATION_KEY_FIELD}
        extra_fields = {k: _clean(v) for k, v in record.items() if k not in standard_fields}

        return cls(
            key=_clean(record.get(PARSER_ID_KEY) or record.get(CITATION_KEY_FIELD)),
            entry_type=_clean(record.get(PARSER_TYPE_KEY) or record.get(ENTRY_TYPE_FIELD)),
            title=_clean(record.get('title')),
            author=_clean(record.get('author')),
            year=_clean(record.get('year')),
            extra_fields=extra_fields,
        )

    def get_field(self, field_name: str) -> str:
        """Get a field value by name; absent fields read as an empty string."""
        attr = _FIELD_ALIASES.get(field_name, field_name)
        if attr in ('key', 'entry_type', 'title', 'author', 'year'):
            return getattr(self, attr)
        return self.extra_fields.get(field_name, "")


EMPTY_ENTRY = Entry()

# Citation key -> Entry, as produced by the parser
EntryStore = Dict[str, Entry]

# Display label -> Entry
DisplayIndex = Dict[str, Entry]
