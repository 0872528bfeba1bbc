from __future__ import annotations

import dataclasses
import logging

import pytest

from splp.protocol import reset_default_session
from splp.settings import SETTINGS


@pytest.fixture(autouse=True)
def _isolate_globals(monkeypatch):
    for item in dataclasses.fields(SETTINGS):
        monkeypatch.setattr(SETTINGS, item.name, getattr(SETTINGS, item.name))
    for name in ("SPLP_LOG_LEVEL", "SPLP_HISTORY_LIMIT", "SPLP_TRANSCRIPT_ENCODING"):
        monkeypatch.delenv(name, raising=False)
    root_level = logging.getLogger().level
    reset_default_session()
    yield
    reset_default_session()
    logging.getLogger().setLevel(root_level)
