"""Subprocess execution service for mariadb-backup."""

import os
import subprocess
from typing import IO, List, Mapping, Optional

from mariadbbackup.errors import BackupError


class CommandRunner:
    """Runs external commands with consistent error handling."""

    def __init__(self, logger, subprocess_module=subprocess):
        self.logger = logger
        self.subprocess = subprocess_module

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        stdout: Optional[IO] = None,
        env: Optional[Mapping[str, str]] = None,
        log_output: bool = True,
        warn_on_failure: bool = True,
    ) -> subprocess.CompletedProcess:
        """Run ``cmd`` and wait for it to finish.

        ``env`` entries are added on top of the current environment. When
        ``stdout`` is given the command's standard output is written to it and
        only standard error is captured. ``log_output=False`` keeps captured
        output out of the debug log, for commands that print secrets.
        ``warn_on_failure=False`` leaves reporting an unchecked failure to the
        caller.
        """
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        run_env = None
        if env:
            run_env = dict(os.environ)
            run_env.update(env)

        try:
            if stdout is not None:
                result = self.subprocess.run(
                    cmd,
                    stdout=stdout,
                    stderr=subprocess.PIPE,
                    text=True,
                    env=run_env,
                )
            else:
                result = self.subprocess.run(
                    cmd,
                    text=True,
                    capture_output=capture_output,
                    env=run_env,
                )
        except FileNotFoundError as exc:
            raise BackupError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except OSError as exc:
            raise BackupError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if log_output and capture_output and result.stdout:
            self.logger.debug("Command output: %s", result.stdout.strip())

        if result.returncode == 0:
            return result

        stderr = (result.stderr or "").strip() if (capture_output or stdout is not None) else ""
        message = f"Command failed ({result.returncode}): {cmd_str}"
        if stderr:
            message = f"{message}\n{stderr}"

        if check:
            raise BackupError(message)

        if warn_on_failure:
            self.logger.warning(message)
        return result
