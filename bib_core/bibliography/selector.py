"""
Entry selection module.

The interactive chooser is injected: ``select`` only needs something that
can present candidate labels and return the one the user picked. The
default implementation drives fzf.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from bib_core.bibliography.index import annotation_for
from bib_core.constants import LABEL_SEPARATOR
from bib_core.exceptions import HostError
from bib_core.fzf_manager import FzfManager
from bib_core.models import Entry, DisplayIndex, EMPTY_ENTRY

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "Bibliography: "

# fzf exit codes meaning "nothing chosen"
FZF_NO_MATCH = 1
FZF_INTERRUPTED = 130

Annotator = Callable[[str], str]


class Chooser(ABC):
    """Interactive narrowing chooser."""

    @abstractmethod
    def choose(self, prompt: str, candidates: List[str],
               annotate: Optional[Annotator] = None) -> Optional[str]:
        """
        Let the user pick one candidate.

        Args:
            prompt: Prompt string
            candidates: Candidate labels
            annotate: Optional callback returning display-only text for a label

        Returns:
            The chosen label, or None if the user cancelled
        """


class FzfChooser(Chooser):
    """Chooser backed by fzf. Annotations are shown as a trailing column."""

    def __init__(self, command: str = "fzf"):
        self.command = command

    def build_manager(self, prompt: str) -> FzfManager:
        return FzfManager(config={"command": self.command}, prompt=prompt)

    def format_candidates(self, candidates: List[str], annotate: Optional[Annotator] = None) -> str:
        """Render one fzf input line per candidate."""
        if annotate is None:
            return "\n".join(candidates)
        return "\n".join(f"{label}{LABEL_SEPARATOR}{annotate(label)}" for label in candidates)

    @staticmethod
    def parse_selection(line: str, annotated: bool) -> str:
        """Strip the annotation column from a selected line."""
        line = line.rstrip("\n")
        if annotated:
            return line.rsplit(LABEL_SEPARATOR, 1)[0]
        return line

    def choose(self, prompt: str, candidates: List[str],
               annotate: Optional[Annotator] = None) -> Optional[str]:
        manager = self.build_manager(prompt)
        additional_args = [
            f"--delimiter={LABEL_SEPARATOR}",
            "--tabstop=1",
            "--tiebreak=begin,index",
            "--no-multi",
        ]
        try:
            result = manager.run_fzf(self.format_candidates(candidates, annotate), additional_args)
        except OSError as e:
            raise HostError(f"Unable to run {self.command}: {e}") from e

        if result.returncode in (FZF_NO_MATCH, FZF_INTERRUPTED):
            logger.debug(f"fzf returned {result.returncode}, nothing selected")
            return None
        if result.returncode != 0:
            raise HostError(f"{self.command} exited with status {result.returncode}")

        selection = result.stdout.strip("\n")
        if not selection:
            return None
        return self.parse_selection(selection, annotate is not None)


def select(index: DisplayIndex, annotation_field: str, chooser: Chooser,
           prompt: str = DEFAULT_PROMPT) -> Optional[Entry]:
    """
    Present the display index and return the chosen entry.

    Returns:
        The chosen Entry; None if the user cancelled or there is nothing to
        choose from. A label that does not resolve yields an empty Entry.
    """
    if not index:
        logger.warning("No bibliography entries to choose from")
        return None

    def annotate(label: str) -> str:
        return annotation_for(index, label, annotation_field)

    choice = chooser.choose(prompt, list(index), annotate)
    if choice is None:
        logger.debug("Selection cancelled")
        return None

    entry = index.get(choice)
    if entry is None:
        logger.warning(f"Selected label does not match any entry: {choice!r}")
        return EMPTY_ENTRY
    return entry
