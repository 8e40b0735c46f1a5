"""Starting commands, either detached from the bar or waited for."""

from __future__ import annotations

import asyncio
import subprocess
import threading
from collections.abc import Sequence


def spawn_process(cmd: str, args: Sequence[str] = ()) -> None:
    """Start a detached process in its own session, working in ``/``, with no stdio."""
    proc = subprocess.Popen(
        [cmd, *args],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        cwd="/",
        start_new_session=True,
    )
    # Reap the child when it exits so it never lingers as a zombie.
    threading.Thread(target=proc.wait, daemon=True).start()


def spawn_shell(cmd: str) -> None:
    """Run a shell command detached."""
    spawn_process("sh", ["-c", cmd])


async def spawn_shell_sync(cmd: str) -> None:
    """Run a shell command and wait for it to finish."""
    proc = await asyncio.create_subprocess_exec(
        "sh",
        "-c",
        cmd,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.DEVNULL,
    )
    await proc.wait()