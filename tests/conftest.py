"""Shared fixtures for bib_core tests."""

from typing import List, Optional

import pytest

from bib_core.config import BibConfig
from bib_core.bibliography.selector import Chooser
from bib_core.host import Host

SAMPLE_BIB = """
@article{doe2020,
  title = {A Very Long Title Exceeding Fifty Five Characters In Total Length For Testing},
  author = {Doe, Jane and Roe, Richard},
  year = {2020},
  journal = {Journal of Testing}
}

@book{smith19,
  title = {X},
  author = {Y},
  year = {2019}
}

@inproceedings{jones2018,
  title = {Shared Title},
  author = {Jones, Alice},
  year = {2018}
}

@inproceedings{jones2018b,
  title = {Shared Title},
  author = {Jones, Alice},
  year = {2018}
}
"""


class FakeChooser(Chooser):
    """Chooser that picks the candidate ending with ``key``, or cancels."""

    def __init__(self, key: Optional[str] = None):
        self.key = key
        self.calls = []
        self.annotations = {}

    def choose(self, prompt, candidates, annotate=None):
        self.calls.append((prompt, list(candidates)))
        if annotate is not None:
            self.annotations = {label: annotate(label) for label in candidates}
        if self.key is None:
            return None
        for label in candidates:
            if label.endswith("\t" + self.key):
                return label
        return None


class RecordingHost(Host):
    """Host that records what it was asked to do."""

    def __init__(self, mode: Optional[str] = None):
        self._mode = mode
        self.opened: List[str] = []
        self.inserted: List[str] = []

    @property
    def mode(self):
        return self._mode

    def open_file(self, path):
        self.opened.append(path)

    def insert_text(self, text):
        self.inserted.append(text)


@pytest.fixture
def bib_file(tmp_path):
    """A BibTeX file with a few entries."""
    path = tmp_path / "references.bib"
    path.write_text(SAMPLE_BIB, encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path, bib_file):
    """Configuration pointing at temporary directories."""
    documents = tmp_path / "documents"
    documents.mkdir()
    return BibConfig(
        bibliography_files=[str(bib_file)],
        notes_dir=str(tmp_path / "notes"),
        documents_dir=str(documents),
        opener=["true"],
        logging={"opener_log": str(tmp_path / "opener.log")},
    )
