"""Shared pytest fixtures and configuration for the tubeport test suite.

Guidelines
----------
* No internet access in any test.
* requests and yt-dlp must be mocked at the infra boundary.
* Core tests drive async operations with ``asyncio.run``.
* File-touching tests use ``tmp_path`` only.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from tubeport.core.models import Profile, Subscription


@pytest.fixture()
def primary_profile() -> Profile:
    return Profile(
        id="allChannels",
        name="All Channels",
        bg_color="#000000",
        text_color="#FFFFFF",
        subscriptions=(Subscription(id="UCold", name="Old", thumbnail="https://t/old"),),
    )


@pytest.fixture()
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def progress() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def dialogs(tmp_path: Path) -> AsyncMock:
    mock = AsyncMock()
    mock.open.return_value = tmp_path / "input"
    mock.save.return_value = tmp_path / "output"
    return mock


@pytest.fixture()
def files() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def profile_store(tmp_path: Path, primary_profile: Profile) -> MagicMock:
    store = MagicMock()
    store.source_path = tmp_path / "profiles.db"
    store.list_profiles.return_value = [primary_profile]
    return store


@pytest.fixture()
def history_store(tmp_path: Path) -> MagicMock:
    store = MagicMock()
    store.source_path = tmp_path / "history.db"
    return store
