"""Shared pytest fixtures for all tests."""

from dataclasses import replace

import httpx
import pytest

from cli.config import Config
from fake_shock import FakeShockStore
from shock.client import ShockClient
from shock.settings import ClientSettings

TEST_URL = "http://shock.test"
TEST_TOKEN = "secret-token"


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .shock directory
    """
    config_dir = tmp_path / '.shock'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir, monkeypatch):
    """
    Create temporary config instance, isolated from SHOCK_* environment variables.

    Returns:
        Config instance with temp config file
    """
    monkeypatch.delenv('SHOCK_URL', raising=False)
    monkeypatch.delenv('SHOCK_TOKEN', raising=False)
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a 10-byte sample file for uploads.

    Returns:
        Path to sample file
    """
    file_path = tmp_path / 'sample.bin'
    file_path.write_bytes(b'0123456789')
    return file_path


@pytest.fixture
def fake_store():
    """In-memory store requiring the test token."""
    return FakeShockStore(required_token=TEST_TOKEN)


@pytest.fixture
def settings():
    """Settings with a 4-byte chunk size so small payloads span several chunks."""
    return ClientSettings(url=TEST_URL, token=TEST_TOKEN, chunk_size=4)


@pytest.fixture
def make_client(fake_store, settings):
    """
    Factory for ShockClients wired to the fake store.

    Use as: async with make_client() as client: ...
    """
    def factory(**overrides) -> ShockClient:
        client_settings = replace(settings, **overrides)
        return ShockClient(client_settings, transport=httpx.ASGITransport(app=fake_store.app))

    return factory
