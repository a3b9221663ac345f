"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any app import so the global settings
never pick up a developer's .env file.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["TESTING"] = "true"

os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-3.5-turbo")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.core.app_factory import create_app
from app.core.config import AppSettings, LLMSettings, LogSettings, Settings


class FakeClock:
    """Deterministic clock used to test expiry and window boundaries."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_llm() -> MagicMock:
    """LLM client whose ``complete`` is an AsyncMock returning a fixed text."""
    llm = MagicMock()
    llm.complete = AsyncMock(return_value="A cat is a soft, furry pet that says meow.")
    return llm


def build_settings(**app_overrides) -> Settings:
    return Settings(
        llm=LLMSettings(provider="openai", model="gpt-3.5-turbo", api_key="test-key-123"),
        app=AppSettings(**app_overrides),
        log=LogSettings(level="WARNING"),
    )


@pytest.fixture
def make_client(fake_llm: MagicMock, clock: FakeClock) -> Callable[..., TestClient]:
    """Build a TestClient around a fresh app with fake provider and clock."""

    def _make(**app_overrides) -> TestClient:
        app = create_app(
            settings=build_settings(**app_overrides),
            llm=fake_llm,
            clock=clock,
            configure_logs=False,
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    return make_client()
