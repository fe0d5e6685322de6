from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    project_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def _clean_intcode_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("INTCODE_LOG", "INTCODE_ON_STARVE", "INTCODE_MAX_STEPS"):
        monkeypatch.delenv(name, raising=False)
