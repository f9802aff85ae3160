from __future__ import annotations
import asyncio
import sys
from pathlib import Path
from typing import List

import pytest

# Make "src" and the test helpers importable
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays instead of waiting them out."""
    recorded: List[float] = []
    real_sleep = asyncio.sleep

    async def fake_sleep(delay, *args, **kwargs):
        recorded.append(delay)
        await real_sleep(0)

    monkeypatch.setattr("restlm.resilience.retrying_client.asyncio.sleep", fake_sleep)
    return recorded
