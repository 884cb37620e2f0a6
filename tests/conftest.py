import pytest

from textgrep.core.constants import DEFAULT_MAX_FILES_TO_SEARCH, DEFAULT_STREAM_THRESHOLD_BYTES
from textgrep.core.settings import settings


@pytest.fixture(autouse=True)
def textgrep_env(monkeypatch, tmp_path):
    monkeypatch.setenv("TEXTGREP_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("TEXTGREP_LOG_JSON", "1")
    # settings is built at import time; pin the engine limits per test
    monkeypatch.setattr(settings, "STREAM_THRESHOLD_BYTES", DEFAULT_STREAM_THRESHOLD_BYTES)
    monkeypatch.setattr(settings, "MAX_FILES_TO_SEARCH", DEFAULT_MAX_FILES_TO_SEARCH)
    monkeypatch.setattr(settings, "PROJECT_ROOT", str(tmp_path))
    monkeypatch.setattr(settings, "LOG_LEVEL", "WARNING")


@pytest.fixture
def make_tree(tmp_path):
    """Write {relative_path: text_or_bytes} under tmp_path and return the root."""
    def _make(files, root=None):
        base = root or tmp_path
        for rel, content in files.items():
            p = base / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                p.write_bytes(content)
            else:
                p.write_text(content, encoding="utf-8")
        return base
    return _make
