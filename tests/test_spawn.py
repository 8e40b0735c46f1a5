import time

import pytest

from barstatus.spawn import spawn_process, spawn_shell, spawn_shell_sync


def _wait_for_line(path, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if path.exists():
            text = path.read_text()
            if text.endswith("\n"):
                return text
        time.sleep(0.02)
    return None


@pytest.mark.asyncio
async def test_spawn_shell_sync_waits_for_command(tmp_path):
    target = tmp_path / "out.txt"
    await spawn_shell_sync(f"echo hello > '{target}'")
    assert target.read_text() == "hello\n"


def test_spawn_shell_runs_detached(tmp_path):
    target = tmp_path / "out.txt"
    spawn_shell(f"echo detached > '{target}'")
    assert _wait_for_line(target) == "detached\n"


def test_spawn_process_runs_in_root_directory(tmp_path):
    target = tmp_path / "cwd.txt"
    spawn_process("sh", ["-c", f"pwd > '{target}'"])
    assert _wait_for_line(target) == "/\n"


def test_spawn_process_missing_command_raises():
    with pytest.raises(FileNotFoundError):
        spawn_process("thequickbrownfoxjumpsoverthelazydog", [])