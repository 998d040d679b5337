"""
A shared module for running fzf.

This module builds the fzf command line with consistent options for the
bibliography chooser.
"""

import subprocess
import logging
from typing import List, Dict, Any, Optional

logger = logging.getLogger(__name__)


class FzfManager:
    """A class for managing fzf configuration."""

    def __init__(self, config: Dict[str, Any] = None, prompt: Optional[str] = None):
        """
        Initialize a new FzfManager instance.

        Args:
            config: Optional configuration dictionary
            prompt: Optional prompt shown by fzf
        """
        self.config = config or {}
        self.prompt = prompt

    def get_fzf_args(self, additional_args: Optional[List[str]] = None) -> List[str]:
        """
        Build the complete fzf arguments list.

        Args:
            additional_args: Additional arguments to add to the fzf command

        Returns:
            List of strings to pass to subprocess.run
        """
        fzf_args = [self.config.get("command", "fzf")]

        if self.prompt:
            fzf_args.append(f"--prompt={self.prompt}")

        if additional_args:
            fzf_args.extend(additional_args)

        return fzf_args

    def run_fzf(self, input_data: Optional[str] = None,
                additional_args: Optional[List[str]] = None) -> subprocess.CompletedProcess:
        """
        Run fzf with the configured arguments.

        stderr is left attached to the terminal, since fzf draws its
        interface there.

        Args:
            input_data: Optional string data to pipe to fzf's stdin
            additional_args: Additional arguments to pass to fzf

        Returns:
            The completed process object from subprocess.run
        """
        fzf_args = self.get_fzf_args(additional_args)
        logger.debug(f"Running fzf: {' '.join(fzf_args)}")

        try:
            return subprocess.run(fzf_args, input=input_data or "", text=True,
                                  stdout=subprocess.PIPE)
        except Exception as e:
            logger.error(f"Error running fzf: {e}")
            raise
