"""Async subprocess execution with a timeout."""

from __future__ import annotations

import asyncio
import os
import signal
from pathlib import Path


def _kill_group(proc: asyncio.subprocess.Process) -> None:
    try:
        os.killpg(os.getpgid(proc.pid), signal.SIGKILL)
    except (ProcessLookupError, OSError):
        try:
            proc.kill()
        except ProcessLookupError:
            pass


async def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    timeout: float = 60.0,
) -> tuple[int, str, str]:
    """Run a subprocess with timeout, return (returncode, stdout, stderr).

    Uses asyncio.create_subprocess_exec -- never shell=True.
    Uses start_new_session=True so child processes can be killed as a group,
    both on timeout and when the awaiting task is cancelled.
    A timed-out command returns -1 with the timeout noted in stderr.
    """
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
        start_new_session=True,
    )
    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError:
        _kill_group(proc)
        await proc.wait()
        return (-1, "", f"Command timed out after {timeout}s")
    except asyncio.CancelledError:
        _kill_group(proc)
        raise

    return (
        proc.returncode or 0,
        stdout_bytes.decode(errors="replace"),
        stderr_bytes.decode(errors="replace"),
    )
