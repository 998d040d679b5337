"""Configuration management for bib_core."""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bib_core.constants import (
    DEFAULT_CONFIG_PATH, DEFAULT_BIB_FILES, DEFAULT_NOTES_DIR, DEFAULT_DOCUMENTS_DIR,
    DEFAULT_LOG_FILE, DEFAULT_LOG_LEVEL, DEFAULT_NOTE_EXTENSION, DEFAULT_SEARCH_FIELD,
    DEFAULT_ANNOTATION_FIELD, DEFAULT_FIELDS, REQUIRED_FIELDS, DEFAULT_CITE_FORMATS,
    default_opener
)

logger = logging.getLogger(__name__)


def resolve_path(path: str) -> str:
    """Resolve path with environment variables and user home."""
    if path is None:
        return None
    return os.path.expanduser(os.path.expandvars(path))


class LoggingConfig(BaseModel):
    """Logging configuration model."""
    model_config = ConfigDict(validate_default=True)

    level: str = Field(default=DEFAULT_LOG_LEVEL, description="Logging level")
    file: Optional[str] = Field(default=None, description="Log file path")
    opener_log: str = Field(default=DEFAULT_LOG_FILE,
                            description="File receiving the output of opener processes")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            logger.warning(f"Invalid logging level: {v}. Using default: {DEFAULT_LOG_LEVEL}")
            return DEFAULT_LOG_LEVEL
        return v.upper()

    @field_validator('file', 'opener_log')
    @classmethod
    def resolve_log_path(cls, v: Optional[str]) -> Optional[str]:
        return resolve_path(v)


class BibConfig(BaseModel):
    """Main configuration model."""
    model_config = ConfigDict(validate_default=True)

    bibliography_files: List[str] = Field(default_factory=lambda: list(DEFAULT_BIB_FILES),
                                          description="BibTeX files to load")
    notes_dir: str = Field(default=DEFAULT_NOTES_DIR, description="Directory holding notes")
    documents_dir: str = Field(default=DEFAULT_DOCUMENTS_DIR,
                               description="Directory holding <key>.<ext> documents")
    note_extension: str = Field(default=DEFAULT_NOTE_EXTENSION, description="Extension of note files")
    opener: List[str] = Field(default_factory=default_opener,
                              description="Command used to open documents")
    search_field: str = Field(default=DEFAULT_SEARCH_FIELD, description="Field shown in the label")
    annotation_field: str = Field(default=DEFAULT_ANNOTATION_FIELD,
                                  description="Field shown beside each label")
    fields: List[str] = Field(default_factory=lambda: list(DEFAULT_FIELDS),
                              description="Fields extracted from each entry")
    cite_formats: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CITE_FORMATS),
                                         description="Citation format per editor mode")
    socket_path: Optional[str] = Field(default=None, description="Neovim socket path")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    @field_validator('bibliography_files', mode='before')
    @classmethod
    def resolve_bibliography_files(cls, v: Any) -> List[str]:
        """Accept a single path or a list of paths."""
        if isinstance(v, str):
            v = [v]
        return [resolve_path(p) for p in v]

    @field_validator('notes_dir', 'documents_dir', 'socket_path')
    @classmethod
    def resolve_dirs(cls, v: Optional[str]) -> Optional[str]:
        return resolve_path(v)

    @field_validator('note_extension')
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Validate note extension."""
        if not v.startswith('.'):
            v = '.' + v
        return v

    @field_validator('opener', mode='before')
    @classmethod
    def split_opener(cls, v: Any) -> List[str]:
        if isinstance(v, str):
            v = v.split()
        return v

    @field_validator('fields')
    @classmethod
    def ensure_required_fields(cls, v: List[str]) -> List[str]:
        """Title and author are needed for labels, annotations and notes."""
        fields = list(v)
        for name in REQUIRED_FIELDS:
            if name not in fields:
                logger.warning(f"Field list is missing '{name}', adding it")
                fields.append(name)
        return fields

    @field_validator('cite_formats')
    @classmethod
    def merge_cite_formats(cls, v: Dict[str, str]) -> Dict[str, str]:
        formats = dict(DEFAULT_CITE_FORMATS)
        formats.update(v)
        return formats


def load_config(config_path: Optional[str] = None) -> BibConfig:
    """
    Load configuration from the YAML config file.

    The bibliography settings may sit at the top level of the file or
    under a ``bib`` section.

    Args:
        config_path: Path to the config file. If None, default is used.

    Returns:
        Validated BibConfig, or defaults if the file is missing or invalid.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    raw_config: Dict[str, Any] = {}

    try:
        resolved_path = resolve_path(path)
        config_file = Path(resolved_path)
        if config_file.exists():
            with open(config_file, 'r', encoding='utf-8') as f:
                raw_config = yaml.safe_load(f) or {}
        else:
            logger.warning(f"Config file '{resolved_path}' not found. Using defaults.")
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading config file '{path}': {e}")

    section = get_config_value(raw_config, "bib", raw_config)
    if not isinstance(section, dict):
        logger.error(f"Config file '{path}' does not contain a mapping. Using defaults.")
        section = {}

    try:
        config = BibConfig(**section)
        logger.debug(f"Loaded and validated configuration from {path}")
    except Exception as validation_error:
        logger.error(f"Configuration validation error: {validation_error}")
        logger.warning("Using default configuration")
        config = BibConfig()

    return config


def with_overrides(config: BibConfig, search: Optional[str] = None,
                   annotation: Optional[str] = None, **extra: Any) -> BibConfig:
    """
    Return a copy of ``config`` with call-scoped overrides applied.

    None values leave the corresponding setting untouched. The original
    config object is not modified.
    """
    updates = {k: v for k, v in extra.items() if v is not None}
    if search is not None:
        updates["search_field"] = search
    if annotation is not None:
        updates["annotation_field"] = annotation
    if not updates:
        return config
    data = config.model_dump()
    data.update(updates)
    return BibConfig(**data)


def setup_logging(config: BibConfig, debug: bool = False) -> None:
    """Apply the logging section of the config to the package logger."""
    package_logger = logging.getLogger("bib_core")
    package_logger.setLevel(logging.DEBUG if debug else config.logging.level)
    if config.logging.file:
        try:
            os.makedirs(os.path.dirname(config.logging.file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(config.logging.file)
            file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
            package_logger.addHandler(file_handler)
        except OSError as e:
            logger.error(f"Unable to open log file '{config.logging.file}': {e}")


def get_config_value(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get configuration value using a dot-separated path.

    Args:
        config: Configuration dictionary
        key_path: Dot-separated path (e.g., "section.key")
        default: Default value if path not found

    Returns:
        Configuration value or default if not found
    """
    keys = key_path.split('.')
    current = config

    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return default

    return current
