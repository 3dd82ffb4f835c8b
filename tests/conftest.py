"""Test configuration for pytest.

Ensure the repository root is on sys.path so tests can import ``mmu`` and
``utils`` without the project being installed.
"""
import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from mmu import MMUConfig, MemoryManagementUnit  # noqa: E402


class TickClock:
    """Deterministic clock: 1.0, 2.0, 3.0, ..."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        self.now += 1.0
        return self.now


@pytest.fixture
def make_mmu():
    def _make(num_pages=64, num_frames=16, page_size=1024, tlb_size=16):
        config = MMUConfig(num_pages, num_frames, page_size, tlb_size)
        return MemoryManagementUnit(config, clock=TickClock())
    return _make
