from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for entry in (ROOT, SRC):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

import pytest

from uselsp.completion import CompletionProvider
from uselsp.diagnostics import DiagnosticEngine


@pytest.fixture
def engine() -> DiagnosticEngine:
    return DiagnosticEngine()


@pytest.fixture
def provider() -> CompletionProvider:
    return CompletionProvider()
