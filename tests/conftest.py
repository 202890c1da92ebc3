# tests/conftest.py
# Offscreen Qt application, fake clock and isolated vault fixtures

import os
import tempfile

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("OPEN_CAPTURE_LOG_DIR", tempfile.mkdtemp(prefix="open-capture-logs-"))

from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from loguru import logger

from open_capture_core.open_capture_core import logger as app_logger

app_logger.configure()

from core.indicator import IndicatorPublisher
from core.output_resolver import OutputResolver
from core.session_recorder import SessionRecorder
from core.settings import SettingsStore
from core.timer_engine import TimerEngine


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


class FakeClock:
    """Callable clock advanced explicitly by tests."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 0, milliseconds: int = 0) -> None:
        self.now += timedelta(seconds=seconds, milliseconds=milliseconds)


class RecordingSurface:
    """Presentation surface double that keeps everything it was shown."""

    def __init__(self) -> None:
        self.texts: List[str] = []
        self.snapshots: List[Dict[str, Any]] = []
        self.fail_with: Optional[Exception] = None

    def set_indicator_text(self, text: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.texts.append(text)

    def broadcast(self, snapshot: Dict[str, Any]) -> None:
        self.snapshots.append(snapshot)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 5, 17, 9, 30, 0))


@pytest.fixture
def vault(tmp_path) -> Path:
    path = tmp_path / "vault"
    path.mkdir()
    return path


@pytest.fixture
def settings_store(tmp_path, vault) -> SettingsStore:
    store = SettingsStore(tmp_path / "settings.json")
    store.update_settings(vault_path=str(vault))
    return store


@pytest.fixture
def resolver(settings_store) -> OutputResolver:
    return OutputResolver(settings_store)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def engine(surface, resolver, clock) -> TimerEngine:
    timer_engine = TimerEngine(IndicatorPublisher(surface), SessionRecorder(resolver), clock=clock)
    yield timer_engine
    timer_engine._timer.stop()


@pytest.fixture
def log_records():
    """Capture loguru output as (level, message) tuples."""
    records = []
    handler_id = logger.add(lambda message: records.append((message.record["level"].name, message.record["message"])), level="DEBUG")
    yield records
    logger.remove(handler_id)
