from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure the sendrec package is importable during local runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sendrec.core import config as core_config  # noqa: E402
from sendrec.services.waitlist_service import WaitlistStore  # noqa: E402


@pytest.fixture()
def data_file(tmp_path):
    return tmp_path / "data" / "waitlist.json"


@pytest.fixture()
def store(data_file):
    """Fresh store on a temporary snapshot path; the worker is shut down afterwards."""
    s = WaitlistStore.open(data_file)
    yield s
    s.close()


@pytest.fixture()
def clean_settings(monkeypatch):
    for name in ("APP_ENV", "HOST", "PORT", "WAITLIST_DATA_FILE", "LOG_LEVEL", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    core_config.get_settings.cache_clear()
    yield monkeypatch
    core_config.get_settings.cache_clear()
