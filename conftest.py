"""Repository-wide pytest configuration.

Pins ``src/`` on the import path so the suites run from a plain checkout as
well as from an installed package, and keeps environment variables read at
the CLI boundary from leaking between tests.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("PYTEST_DISABLE_PLUGIN_AUTOLOAD", "1")


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    for key in ["LINK", "RPC_URL", "RDD", "OCR2_PAYEES_CONFIG"]:
        monkeypatch.delenv(key, raising=False)

    # ``configure_logging`` replaces the root handlers; put pytest's back afterwards.
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
