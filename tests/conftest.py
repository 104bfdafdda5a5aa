import pytest


class RecordingLog:
    """loguru-compatible stand-in that keeps every call for assertions."""

    def __init__(self):
        self.records = []

    def _record(self, level, message, context):
        self.records.append((level, message, context))

    def debug(self, message, **context):
        self._record('DEBUG', message, context)

    def info(self, message, **context):
        self._record('INFO', message, context)

    def success(self, message, **context):
        self._record('SUCCESS', message, context)

    def warning(self, message, **context):
        self._record('WARNING', message, context)

    def error(self, message, **context):
        self._record('ERROR', message, context)

    def messages(self, level):
        return [message for lvl, message, _ in self.records if lvl == level]


@pytest.fixture
def recording_log():
    return RecordingLog()


@pytest.fixture
def clean_env(monkeypatch):
    for name in ('PROVIDER', 'GITHUB_TOKEN', 'OPENAI_API_KEY', 'PROMPT_TEMPLATE'):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
