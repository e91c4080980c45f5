"""
Shared test configuration and fixtures.

Provides registries isolated per test and a few canned log sessions.
"""

import json

import pytest

from log_facets import EngineConfig, LogFacetCommands, SessionRegistry, reset_default_registry


def lines(*records) -> list[str]:
    """Serialize records to raw JSON lines."""
    return [json.dumps(r) for r in records]


@pytest.fixture
def config() -> EngineConfig:
    """Configuration with a short lock timeout so lock tests stay fast."""
    return EngineConfig(lock_timeout_seconds=0.05)


@pytest.fixture
def registry(config: EngineConfig) -> SessionRegistry:
    """Fresh registry per test."""
    return SessionRegistry(config)


@pytest.fixture
def commands(registry: SessionRegistry) -> LogFacetCommands:
    """Command surface over the per-test registry."""
    return LogFacetCommands(registry)


@pytest.fixture
def level_lines() -> list[str]:
    """Three records: lvl a, b, a."""
    return lines({"lvl": "a"}, {"lvl": "b"}, {"lvl": "a"})


@pytest.fixture
def service_lines() -> list[str]:
    """Mixed service log with levels, sources and nested context."""
    return lines(
        {"level": "info", "src": "api", "msg": "Request started", "ms": 12},
        {"level": "error", "src": "db", "msg": "Connection reset", "ms": 250},
        {"level": "info", "src": "db", "msg": "Query ok", "ms": 40},
        {"level": "warn", "src": "api", "msg": "Slow request", "ctx": {"route": "/Users"}},
        {"level": "error", "src": "api", "msg": "Timeout talking to upstream", "ms": 5000},
    )


@pytest.fixture(autouse=True)
def _clean_default_registry():
    """Tests never share the process default registry."""
    reset_default_registry()
    yield
    reset_default_registry()
