#!/usr/bin/env python3
"""
Tests for bibliography parsing and entry models.
"""

import pytest

from bib_core.bibliography.parser import parse_bibliography, load_entries
from bib_core.exceptions import BibliographyLoadError
from bib_core.models import Entry, EMPTY_ENTRY

from conftest import SAMPLE_BIB


def test_entry_from_record():
    """Parser records map onto named fields plus extra fields."""
    entry = Entry.from_record({
        "ID": "smith19",
        "ENTRYTYPE": "book",
        "title": "X",
        "author": "Y",
        "publisher": "Press",
    })
    assert entry.key == "smith19"
    assert entry.entry_type == "book"
    assert entry.title == "X"
    assert entry.author == "Y"
    assert entry.year == ""
    assert entry.extra_fields == {"publisher": "Press"}


def test_entry_get_field_pseudo_fields():
    entry = Entry(key="k", entry_type="article", title="T", extra_fields={"journal": "J"})
    assert entry.get_field("=key=") == "k"
    assert entry.get_field("ID") == "k"
    assert entry.get_field("=type=") == "article"
    assert entry.get_field("ENTRYTYPE") == "article"
    assert entry.get_field("journal") == "J"
    assert entry.get_field("missing") == ""


def test_entry_collapses_whitespace():
    entry = Entry.from_record({"ID": "k", "ENTRYTYPE": "misc", "title": "Two\n   lines"})
    assert entry.title == "Two lines"


def test_entry_is_immutable():
    entry = Entry(key="k")
    with pytest.raises(Exception):
        entry.key = "other"


def test_empty_entry():
    assert EMPTY_ENTRY.key == ""
    assert EMPTY_ENTRY.get_field("title") == ""


def test_parse_bibliography():
    entries = parse_bibliography(SAMPLE_BIB, ["title", "author"])
    assert list(entries) == ["doe2020", "smith19", "jones2018", "jones2018b"]

    doe = entries["doe2020"]
    assert doe.entry_type == "article"
    assert doe.title.startswith("A Very Long Title")
    assert doe.author == "Doe, Jane and Roe, Richard"


def test_parse_bibliography_keeps_requested_fields_only():
    entries = parse_bibliography(SAMPLE_BIB, ["title", "author"])
    assert entries["doe2020"].year == ""
    assert "journal" not in entries["doe2020"].extra_fields

    entries = parse_bibliography(SAMPLE_BIB, ["title", "author", "journal"])
    assert entries["doe2020"].extra_fields["journal"] == "Journal of Testing"


def test_load_entries_multiple_files(tmp_path, bib_file):
    """The first file defining a key wins, other keys are merged."""
    second = tmp_path / "second.bib"
    second.write_text(
        "@book{smith19, title = {Other X}, author = {Other Y}}\n"
        "@misc{extra1, title = {Extra}, author = {E}}\n",
        encoding="utf-8",
    )
    entries = load_entries([str(bib_file), str(second)], ["title", "author"])

    assert len(entries) == 5
    assert entries["smith19"].title == "X"
    assert entries["extra1"].title == "Extra"


def test_load_entries_skips_missing_file(tmp_path, bib_file):
    entries = load_entries([str(tmp_path / "missing.bib"), str(bib_file)])
    assert "smith19" in entries


def test_load_entries_all_missing(tmp_path):
    with pytest.raises(BibliographyLoadError):
        load_entries([str(tmp_path / "missing.bib")])


def test_load_entries_reloads_every_time(bib_file):
    """Nothing is cached between loads."""
    first = load_entries([str(bib_file)])
    bib_file.write_text("@misc{fresh, title = {Fresh}, author = {F}}\n", encoding="utf-8")
    second = load_entries([str(bib_file)])

    assert "smith19" in first
    assert list(second) == ["fresh"]
