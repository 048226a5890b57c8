"""
hashwatch Rebuilder.

Runs the external build command after a confirmed change.
Requires Python 3.11+.
"""

import asyncio
import time
from collections.abc import Sequence
from pathlib import Path

from utils.config import get_settings
from utils.errors import RebuildError
from utils.logger import LoggerMixin


class Rebuilder(LoggerMixin):
    """
    Invokes the build command and turns its result into an error.

    The build is considered clean only when it exits with status 0
    and prints nothing. Any output, even from a successful run, is
    returned verbatim as a RebuildError so it reaches the user.
    """

    def __init__(
        self,
        command: Sequence[str] | None = None,
        cwd: Path | None = None,
    ) -> None:
        """
        Initialize the rebuilder.

        Args:
            command: Build command and its fixed arguments
            cwd: Directory the build runs in, the current directory if None
        """
        self._command = list(command) if command else get_settings().build.argv
        if not self._command:
            raise ValueError("build command must not be empty")
        self._cwd = cwd

    @property
    def command(self) -> list[str]:
        return list(self._command)

    async def rebuild(self, extra_args: Sequence[str] = ()) -> None:
        """
        Run the build once and wait for it to finish.

        Args:
            extra_args: Arguments appended to the build command

        Raises:
            RebuildError: The build printed output, exited non-zero,
                or could not be started
        """
        argv = [*self._command, *extra_args]
        start_time = time.perf_counter()
        self.log.debug("rebuild_started", argv=argv)

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=self._cwd,
            )
        except OSError as e:
            self.log.error("rebuild_not_started", argv=argv, error=str(e))
            raise RebuildError(f"{argv[0]}: {e.strerror or e}") from e

        out, _ = await process.communicate()
        output = out.decode("utf-8", errors="replace")
        returncode = process.returncode

        self.log.info(
            "rebuild_finished",
            returncode=returncode,
            output_bytes=len(out),
            time_seconds=round(time.perf_counter() - start_time, 2),
        )

        if output:
            raise RebuildError(output, output=output, returncode=returncode)
        if returncode != 0:
            raise RebuildError(f"exit status {returncode}", returncode=returncode)
