"""
Command execution utilities for bib_core.

This module provides utilities for running external commands with standardized
error handling, and for launching detached processes whose output goes to a
log file.
"""

import os
import logging
import subprocess
import threading
from typing import List, Optional, Tuple, Dict

from bib_core.exceptions import HostError

logger = logging.getLogger(__name__)


class OpenerTask:
    """
    Handle on a process launched with ``CommandExecutor.spawn``.

    The process runs on its own; a daemon thread waits for it and logs its
    exit status. Nothing blocks on the task unless ``wait`` is called.

    The watcher dies with the interpreter, so a short-lived caller such as
    ``bib open`` exits before the status is known. In that case only the
    output redirected to ``log_path`` is recorded.
    """

    def __init__(self, cmd: List[str], process: subprocess.Popen, log_path: str):
        self.cmd = cmd
        self.process = process
        self.log_path = log_path
        self.returncode: Optional[int] = None
        self._watcher = threading.Thread(target=self._watch, daemon=True)
        self._watcher.start()

    def _watch(self) -> None:
        self.returncode = self.process.wait()
        if self.returncode != 0:
            logger.warning(f"{' '.join(self.cmd)} exited with status {self.returncode} "
                           f"(see {self.log_path})")
        else:
            logger.debug(f"{' '.join(self.cmd)} finished")

    def wait(self, timeout: Optional[float] = None) -> Optional[int]:
        """Block until the process exits; only tests and scripts should need this."""
        self._watcher.join(timeout)
        return self.returncode


class CommandExecutor:
    """Class for executing external commands with proper error handling."""

    @staticmethod
    def run(
        cmd: List[str],
        input_data: Optional[str] = None,
        check: bool = False,
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[str] = None
    ) -> Tuple[int, str, str]:
        """
        Run a command and return the return code, stdout, and stderr.

        Args:
            cmd: Command to run as a list of strings
            input_data: Optional string to pass as stdin
            check: Whether to raise an exception on non-zero return code
            env: Optional environment variables to set
            cwd: Optional working directory

        Returns:
            Tuple containing (return_code, stdout, stderr)
        """
        try:
            process_env = os.environ.copy()
            if env:
                process_env.update(env)

            proc = subprocess.run(
                cmd,
                input=input_data,
                text=True,
                capture_output=True,
                check=check,
                env=process_env,
                cwd=cwd
            )
            return proc.returncode, proc.stdout, proc.stderr
        except subprocess.CalledProcessError as e:
            logger.error(f"Command failed: {' '.join(cmd)}")
            return e.returncode, e.stdout or "", e.stderr or ""
        except Exception as e:
            logger.error(f"Error running command {' '.join(cmd)}: {e}")
            return 1, "", f"Error executing command: {e}"

    @staticmethod
    def run_and_check(
        cmd: List[str],
        error_message: str = "Command failed",
        input_data: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
        cwd: Optional[str] = None
    ) -> Optional[str]:
        """
        Run a command, check for errors, and return stdout if successful.

        Returns:
            Command output on success, None on failure (with error logged)
        """
        rc, stdout, stderr = CommandExecutor.run(cmd, input_data, False, env, cwd)
        if rc != 0:
            logger.error(f"{error_message}: {stderr}")
            return None
        return stdout

    @staticmethod
    def spawn(cmd: List[str], log_path: str) -> OpenerTask:
        """
        Launch a command without waiting for it.

        stdin is closed, stdout and stderr are appended to ``log_path``. The
        call returns as soon as the process has started; several spawned
        processes may write to the same log concurrently.

        Raises:
            HostError: if the log file cannot be opened or the command cannot start
        """
        try:
            log_dir = os.path.dirname(log_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            log = open(log_path, "a")
        except OSError as e:
            raise HostError(f"Unable to open opener log '{log_path}': {e}") from e

        with log:
            try:
                process = subprocess.Popen(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=log,
                    stderr=subprocess.STDOUT,
                    start_new_session=True
                )
            except OSError as e:
                raise HostError(f"Unable to run {' '.join(cmd)}: {e}") from e
        logger.debug(f"Spawned {' '.join(cmd)} (pid {process.pid}), output in {log_path}")
        return OpenerTask(cmd, process, log_path)
