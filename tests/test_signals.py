import asyncio
import os
import signal

import pytest

from barstatus.signals import Signal, classify_signal, signals_stream


def test_classify_usr_signals():
    assert classify_signal(signal.SIGUSR1) == Signal.USR1
    assert classify_signal(signal.SIGUSR2) == Signal.USR2


def test_classify_realtime_signal_offset():
    assert classify_signal(signal.SIGRTMIN) == Signal.custom(0)
    assert classify_signal(signal.SIGRTMIN + 5) == Signal.custom(5)
    assert Signal.custom(5).kind == "custom"


async def _receive(signum):
    stream = signals_stream()
    task = asyncio.ensure_future(stream.__anext__())
    await asyncio.sleep(0.05)
    os.kill(os.getpid(), signum)
    try:
        return await asyncio.wait_for(task, 5)
    finally:
        await stream.aclose()


@pytest.mark.asyncio
async def test_stream_receives_usr1():
    assert await _receive(signal.SIGUSR1) == Signal.USR1


@pytest.mark.asyncio
async def test_stream_receives_realtime_signal():
    assert await _receive(signal.SIGRTMIN + 2) == Signal.custom(2)