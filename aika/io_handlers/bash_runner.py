"""
Shell command runner for aika.

Runs the commands behind cmd: inputs and named inputs. Standard output is
handed back exactly as the command wrote it, and must be valid UTF-8.
"""
import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Optional

from ..constants import COMMAND_TIMEOUT

logger = logging.getLogger(__name__)

_FALLBACK_SHELLS = ("/bin/bash", "/bin/sh")


@dataclass
class CommandResult:
    """Captured outcome of one shell command."""
    stdout: str
    stderr: str
    return_code: int
    command: str
    timed_out: bool = False
    decode_error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.return_code == 0 and not self.timed_out and self.decode_error is None


class BashRunner:
    """Runs command strings through a shell and captures what they print."""

    def __init__(
        self,
        shell: Optional[str] = None,
        timeout: int = COMMAND_TIMEOUT,
        env: Optional[dict] = None
    ) -> None:
        """
        Args:
            shell: Shell executable (the platform shell if not provided)
            timeout: Seconds a command may run before it is killed
            env: Variables added to the inherited environment
        """
        self._shell = shell or self._platform_shell()
        self._timeout = timeout
        self._env = {**os.environ, **(env or {})}

    @staticmethod
    def _platform_shell() -> str:
        if sys.platform == "win32":
            return os.environ.get("COMSPEC", "cmd.exe")
        for candidate in _FALLBACK_SHELLS:
            if os.path.exists(candidate):
                return candidate
        return os.environ.get("SHELL", "sh")

    def _argv(self, command: str) -> list[str]:
        if sys.platform == "win32":
            return [self._shell, "/c", command]
        return [self._shell, "-c", command]

    def run(
        self,
        command: str,
        timeout: Optional[int] = None,
        cwd: Optional[str] = None
    ) -> CommandResult:
        """
        Run a command and wait for it to finish.

        Failing to start the shell and running past the timeout are both
        reported as a failed result with return code -1, not raised.
        Standard output that is not valid UTF-8 is not repaired: the result
        fails with decode_error set and stdout left empty.

        Args:
            command: Command line for the shell
            timeout: Override of the runner's timeout, in seconds
            cwd: Directory to run in (the current one if not provided)
        """
        limit = timeout or self._timeout
        logger.debug(f"Running {command!r} in {cwd or os.getcwd()}")

        try:
            completed = subprocess.run(
                self._argv(command),
                capture_output=True,
                timeout=limit,
                cwd=cwd,
                env=self._env
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Command {command!r} timed out after {limit}s")
            return CommandResult("", f"Command timed out after {limit} seconds", -1, command, timed_out=True)
        except OSError as e:
            return CommandResult("", str(e), -1, command)

        stderr = completed.stderr.decode("utf-8", errors="replace")
        try:
            stdout = completed.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.debug(f"{command!r} wrote undecodable output: {e}")
            return CommandResult("", stderr, completed.returncode, command, decode_error=str(e))

        logger.debug(f"{command!r} exited with {completed.returncode} ({len(stdout)} chars)")
        return CommandResult(stdout, stderr, completed.returncode, command)
