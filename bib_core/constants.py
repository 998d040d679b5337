"""Constants for the bib_core package."""

import sys

# Default configuration values
DEFAULT_CONFIG_PATH = "~/.config/bib_scripts/config.yaml"
DEFAULT_BIB_FILES = ["~/bib/references.bib"]
DEFAULT_NOTES_DIR = "~/notes"
DEFAULT_DOCUMENTS_DIR = "~/documents"
DEFAULT_LOG_FILE = "~/.cache/bib_scripts/opener.log"
DEFAULT_LOG_LEVEL = "INFO"

# Notes
DEFAULT_NOTE_EXTENSION = ".org"

# Documents are probed in this order, first match wins
DOCUMENT_EXTENSIONS = ("pdf", "epub", "doc", "docx")

# Display label layout
SEARCH_FIELD_WIDTH = 55
ENTRY_TYPE_WIDTH = 7
ENTRY_TYPE_PAD = 8
ANNOTATION_WIDTH = 15
LABEL_SEPARATOR = "\t"

# Pseudo-fields supplied by the parser
ENTRY_TYPE_FIELD = "=type="
CITATION_KEY_FIELD = "=key="

# Fields
DEFAULT_SEARCH_FIELD = "title"
DEFAULT_ANNOTATION_FIELD = "author"
REQUIRED_FIELDS = ["title", "author"]
DEFAULT_FIELDS = list(REQUIRED_FIELDS)

# Citation formats keyed by editor mode
DEFAULT_CITE_FORMATS = {
    "latex": "\\cite{{{key}}}",
    "org": "[cite:@{key}]",
}
FALLBACK_CITE_FORMAT = "{key}"


def default_opener() -> list:
    """Return the platform's default command for opening a file."""
    if sys.platform == "darwin":
        return ["open"]
    if sys.platform.startswith("win"):
        return ["explorer"]
    return ["xdg-open"]
