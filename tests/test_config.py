#!/usr/bin/env python3
"""
Tests for config module.
"""

import os
import logging

from bib_core.config import (
    BibConfig, load_config, with_overrides, get_config_value, resolve_path, setup_logging
)
from bib_core.constants import DOCUMENT_EXTENSIONS


def test_defaults():
    config = BibConfig()
    assert config.search_field == "title"
    assert config.annotation_field == "author"
    assert config.fields == ["title", "author"]
    assert config.note_extension == ".org"
    assert config.cite_formats["org"] == "[cite:@{key}]"
    assert config.opener
    assert DOCUMENT_EXTENSIONS == ("pdf", "epub", "doc", "docx")


def test_load_config_with_existing_file(tmp_path):
    """Test loading config from an existing file."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "bibliography_files: /data/refs.bib\n"
        "notes_dir: /data/notes\n"
        "note_extension: md\n"
        "opener: zathura --fork\n"
        "fields: [title, year]\n"
        "logging:\n"
        "  level: debug\n",
        encoding="utf-8",
    )

    config = load_config(str(config_file))

    assert config.bibliography_files == ["/data/refs.bib"]
    assert config.notes_dir == "/data/notes"
    assert config.note_extension == ".md"
    assert config.opener == ["zathura", "--fork"]
    assert config.fields == ["title", "year", "author"]
    assert config.logging.level == "DEBUG"


def test_load_config_bib_section(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("bib:\n  documents_dir: /data/pdfs\n  search_field: author\n", encoding="utf-8")

    config = load_config(str(config_file))
    assert config.documents_dir == "/data/pdfs"
    assert config.search_field == "author"


def test_load_config_missing_file(tmp_path):
    config = load_config(str(tmp_path / "missing.yaml"))
    assert config == BibConfig()


def test_load_config_invalid_values(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("fields: 12\n", encoding="utf-8")
    assert load_config(str(config_file)) == BibConfig()


def test_invalid_log_level():
    assert BibConfig(logging={"level": "loud"}).logging.level == "INFO"


def test_cite_formats_merge_with_defaults():
    config = BibConfig(cite_formats={"markdown": "[@{key}]"})
    assert config.cite_formats["markdown"] == "[@{key}]"
    assert config.cite_formats["latex"] == "\\cite{{{key}}}"


def test_with_overrides_returns_copy():
    config = BibConfig()
    overridden = with_overrides(config, search="author", annotation="year")

    assert overridden.search_field == "author"
    assert overridden.annotation_field == "year"
    assert config.search_field == "title"
    assert config.annotation_field == "author"


def test_with_overrides_ignores_none():
    config = BibConfig()
    assert with_overrides(config) is config
    assert with_overrides(config, search=None, notes_dir=None) is config


def test_with_overrides_extra_settings():
    overridden = with_overrides(BibConfig(), notes_dir="~/elsewhere")
    assert overridden.notes_dir == os.path.expanduser("~/elsewhere")


def test_setup_logging_file(tmp_path):
    log_file = tmp_path / "logs" / "bib.log"
    config = BibConfig(logging={"file": str(log_file)})
    package_logger = logging.getLogger("bib_core")
    handlers = list(package_logger.handlers)
    try:
        setup_logging(config, debug=True)
        assert package_logger.level == logging.DEBUG
        assert log_file.parent.is_dir()
        assert len(package_logger.handlers) == len(handlers) + 1
    finally:
        for handler in package_logger.handlers[len(handlers):]:
            package_logger.removeHandler(handler)
            handler.close()
        package_logger.setLevel(logging.NOTSET)


def test_get_config_value():
    """Test retrieval of config values with defaults."""
    config = {
        "section": {
            "key": "value"
        },
        "top_level": "top value"
    }

    assert get_config_value(config, "section.key") == "value"
    assert get_config_value(config, "top_level") == "top value"
    assert get_config_value(config, "missing", "default") == "default"
    assert get_config_value(config, "section.missing", "default") == "default"
    assert get_config_value(config, "missing.key", "default") == "default"


def test_resolve_path():
    """Test path resolution functionality."""
    home = os.path.expanduser("~")
    assert resolve_path("~/test") == os.path.join(home, "test")
    assert resolve_path("/absolute/path") == "/absolute/path"
    assert resolve_path("relative/path") == "relative/path"
    assert resolve_path("") == ""
    assert resolve_path(None) is None
