"""Exception classes for bib_core."""

from typing import Sequence

from bib_core.constants import DOCUMENT_EXTENSIONS


class BibError(Exception):
    """Base exception for bib_core errors."""

    pass


class BibliographyLoadError(BibError):
    """Raised when none of the configured bibliography files could be read."""

    pass


class HostError(BibError):
    """Raised when the editor host, the chooser or the opener cannot be run."""

    pass


class NoteError(BibError):
    """Raised when a note file cannot be created."""

    pass


class DocumentNotFound(BibError):
    """Raised when no document exists for a citation key."""

    def __init__(self, key: str, documents_dir: str,
                 extensions: Sequence[str] = DOCUMENT_EXTENSIONS):
        self.key = key
        self.documents_dir = documents_dir
        self.extensions = tuple(extensions)
        probed = ", ".join(self.extensions)
        super().__init__(f"No document found for '{key}' in {documents_dir} (tried {probed})")
