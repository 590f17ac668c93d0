"""Pytest configuration and fixtures."""

import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

from daylog.config import Config, ENV_OVERRIDES
from daylog.models import TaskRecord, Worklog


@pytest.fixture(autouse=True)
def temp_config_dir(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.daylog and environment."""
    config_dir = tmp_path / ".daylog"
    monkeypatch.setattr("daylog.config.CONFIG_DIR", config_dir)
    monkeypatch.setattr("daylog.config.CONFIG_FILE", config_dir / "config.json")
    monkeypatch.setattr("daylog.config.load_dotenv", lambda *args, **kwargs: False)
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    return config_dir


@pytest.fixture
def full_config():
    """Configuration with every field present."""
    return Config(
        host="https://jira.example.com",
        account="dev",
        password="secret",
        project="AB",
        hours_per_day=8,
    )


@pytest.fixture
def day():
    return date(2025, 12, 31)


@pytest.fixture
def prompter():
    """Prompter whose every question is an AsyncMock."""
    mock = MagicMock()
    mock.ask_for_host = AsyncMock(return_value="https://jira.example.com")
    mock.ask_for_account = AsyncMock(return_value="dev")
    mock.ask_for_password = AsyncMock(return_value="secret")
    mock.ask_for_project = AsyncMock(return_value="AB")
    mock.prompt_day = AsyncMock(return_value=date(2025, 12, 31))
    mock.prompt_task = AsyncMock(return_value="AB-2")
    mock.prompt_hours = AsyncMock(return_value=4)
    mock.prompt_confirmation = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def out():
    """Logger double recording info/error messages."""
    return MagicMock()


class FakeHistory:
    def __init__(self, keys=None, error=None):
        self.keys = keys or []
        self.error = error

    async def get_suggested_task_keys(self, project, day):
        if self.error:
            raise self.error
        return list(self.keys)


class FakeTracker:
    def __init__(self, keys=None, records=None, worklogs=None, error=None):
        self.keys = keys or []
        self.records = records or {}
        self.worklogs = worklogs or []
        self.error = error
        self.lookups = []
        self.sent = []

    async def get_suggested_task_keys(self, project, day):
        if self.error:
            raise self.error
        return list(self.keys)

    async def find_tasks_with_keys(self, keys):
        self.lookups.append(list(keys))
        unique = list(dict.fromkeys(keys))
        return [TaskRecord(key, self.records[key]) for key in unique if key in self.records]

    async def get_worklogs(self, project, day):
        return [Worklog(date=day, hours=h) for h in self.worklogs]

    async def send_worklog(self, day, key, hours):
        self.sent.append((day, key, hours))


@pytest.fixture
def fake_history():
    return FakeHistory


@pytest.fixture
def fake_tracker():
    return FakeTracker


@pytest.fixture
def mock_requests_session():
    """Mock requests session for API testing."""
    with patch("requests.Session") as mock_session:
        mock_instance = MagicMock()
        mock_session.return_value = mock_instance
        yield mock_instance
