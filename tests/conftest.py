import os
import sys
import tempfile
from pathlib import Path

import pytest

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storage.migrate import migrate
from config.settings import settings
from config.registry import bind_model, CHAT_KEY, REPORT_KEY


class FakeModel:
    """Records every call and answers from a script or a fixed reply."""

    def __init__(self, reply="Nice to meet you! What grade are you in?"):
        self.reply = reply
        self.calls = []

    def __call__(self, *, messages, options=None):
        self.calls.append({"messages": list(messages), "options": options})
        if isinstance(self.reply, Exception):
            raise self.reply
        if callable(self.reply):
            return self.reply(messages)
        return self.reply


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


@pytest.fixture
def chat_model():
    model = FakeModel()
    bind_model(CHAT_KEY, model)
    return model


@pytest.fixture
def report_model():
    model = FakeModel(reply='{"overallSummary": "A curious learner."}')
    bind_model(REPORT_KEY, model)
    return model


class StaticSettings:
    def __init__(self, **values):
        self.values = {key: str(value) for key, value in values.items()}

    def get(self, key):
        return self.values.get(key)


@pytest.fixture
def static_settings():
    return StaticSettings
