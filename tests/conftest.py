# SPDX-FileCopyrightText: 2025 Eric Löffler <eric.loeffler@opalia.systems>
# SPDX-License-Identifier: GPL-3.0-or-later

import importlib.util
import json
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

EVALUATORS_DIR = Path(__file__).resolve().parent.parent / "extensions" / "when_evaluators"


@pytest.fixture
def utc_tz() -> ZoneInfo:
    return ZoneInfo("UTC")


@pytest.fixture
def sydney_tz() -> ZoneInfo:
    return ZoneInfo("Australia/Sydney")


@pytest.fixture
def new_york_tz() -> ZoneInfo:
    return ZoneInfo("America/New_York")


def load_evaluator(name: str):
    path = EVALUATORS_DIR / name / "app.py"
    spec = importlib.util.spec_from_file_location(f"evaluator_{name}", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def run_evaluator(capsys):
    """Run an evaluator's main() and return (exit code, parsed stdout JSON or None, stderr)."""

    def _run(name: str, *args: str):
        module = load_evaluator(name)
        code = module.main(["app.py", *args])
        captured = capsys.readouterr()
        out = json.loads(captured.out) if code == 0 else None
        return code, out, captured.err

    return _run
