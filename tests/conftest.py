import pytest

from core.config import AppSettings


@pytest.fixture()
def settings() -> AppSettings:
    """Settings isolated from any local `.env` file."""
    return AppSettings(
        http_timeout_seconds=1.0,
        race_deadline_seconds=1.0,
        _env_file=None,
    )
