import os
import tempfile
from typing import Callable, List

import pytest

# Keep test logs out of the working tree; must be set before batchgen is imported.
os.environ.setdefault("BATCHGEN_LOG_DIR", tempfile.mkdtemp(prefix="batchgen-logs-"))


class SleepRecorder:
    """Awaitable stand-in for ``asyncio.sleep`` that only records delays."""

    def __init__(self) -> None:
        self.delays: List[float] = []
        self.hooks: List[Callable[[float], None]] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        for hook in self.hooks:
            hook(delay)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture(autouse=True)
def _clear_backoff_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("BATCHGEN_BACKOFF", raising=False)
