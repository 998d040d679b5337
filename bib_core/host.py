"""
Editor host integration.

A host is where the result of an action lands: it reports the mode of the
document being edited, opens note files and inserts citation text at the
cursor. Neovim is driven over its RPC socket; without a socket the text is
typed into the active tmux pane and files are opened with $EDITOR.
"""

import os
import logging
import subprocess
from abc import ABC, abstractmethod
from typing import Optional

import pynvim

from bib_core.commands import CommandExecutor
from bib_core.exceptions import HostError

logger = logging.getLogger(__name__)


class Host(ABC):
    """The editing surface an action reports back to."""

    @property
    @abstractmethod
    def mode(self) -> Optional[str]:
        """Mode of the current document (e.g. "latex", "org"), or None."""

    @abstractmethod
    def open_file(self, path: str) -> None:
        """Open ``path`` for editing."""

    @abstractmethod
    def insert_text(self, text: str) -> None:
        """Insert ``text`` at the current insertion point."""


class NvimHost(Host):
    """Neovim instance reached through its RPC socket."""

    def __init__(self, socket_path: str):
        self.socket_path = socket_path
        self._nvim = None

    @property
    def nvim(self):
        if self._nvim is None:
            try:
                self._nvim = pynvim.attach("socket", path=self.socket_path)
            except Exception as e:
                raise HostError(f"Failed to attach to Neovim socket {self.socket_path}: {e}") from e
            logger.debug(f"Attached to Neovim at {self.socket_path}")
        return self._nvim

    @property
    def mode(self) -> Optional[str]:
        filetype = self.nvim.current.buffer.options["filetype"]
        return filetype or None

    def open_file(self, path: str) -> None:
        self.nvim.command(f"edit {self.nvim.funcs.fnameescape(path)}")

    def insert_text(self, text: str) -> None:
        # charwise put after the cursor, leaving the cursor after the text
        self.nvim.api.put([text], "c", True, True)


class TmuxHost(Host):
    """Types text into the active tmux pane and opens files with $EDITOR."""

    def __init__(self, mode: Optional[str] = None, editor: Optional[str] = None):
        self._mode = mode
        self.editor = editor or os.getenv("EDITOR", "nvim")

    @property
    def mode(self) -> Optional[str]:
        return self._mode

    def open_file(self, path: str) -> None:
        try:
            subprocess.run([self.editor, path], check=False)
        except OSError as e:
            raise HostError(f"Unable to start editor '{self.editor}': {e}") from e

    def insert_text(self, text: str) -> None:
        if CommandExecutor.run_and_check(["tmux", "send-keys", "-l", text],
                                         "Error sending keys to tmux") is None:
            raise HostError("Could not send the citation to tmux")
