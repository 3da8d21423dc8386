from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def _load(relative: str) -> Any:
    return json.loads((DATA_DIR / relative).read_text(encoding="utf-8"))


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def demo_payload() -> dict[str, Any]:
    return _load("experiences/demo.json")


@pytest.fixture
def demo_results() -> dict[str, Any]:
    return _load("results/demo.json")
