"""
Pytest configuration and fixtures for suggest-validation tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import json
from pathlib import Path

import pytest
import yaml

from suggest_validation.context import ValidationContext
from suggest_validation.core.exceptions import ConfigError
from suggest_validation.core.tiers import DEFAULT_TIER_CONFIG_PATH, TierConfigBuilder, load_tier_config
from suggest_validation.observability.endpoint import MetricsSettings


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests across the validation and metrics layers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that drive the CLI"
    )


# =======================
# TIER CONFIGURATION FIXTURES
# =======================

@pytest.fixture(scope="session")
def tier_config():
    """
    Packaged default tier configuration

    Returns:
        TierConfig loaded from suggest_property_tiers.yaml
    """
    result = load_tier_config(DEFAULT_TIER_CONFIG_PATH)
    assert not isinstance(result, ConfigError), result
    return result


@pytest.fixture
def tier_builder() -> TierConfigBuilder:
    """
    Builder pre-populated with a small core tier and one property per other tier

    Returns:
        TierConfigBuilder
    """
    return (
        TierConfigBuilder(version="test")
        .add_property("lat", "core", "number")
        .add_property("lng", "core", "number")
        .add_property("amenity", "core", "enum")
        .add_property("name", "high_frequency", "string")
        .add_property("description", "optional", "string")
        .add_property("wikidata", "specialized", "string")
    )


@pytest.fixture
def tier_yaml(tmp_path, tier_builder) -> Path:
    """
    Tier document written to a temporary YAML file

    Returns:
        Path to the YAML file
    """
    path = tmp_path / "tiers.yaml"
    path.write_text(yaml.safe_dump(tier_builder.build_document()), encoding="utf-8")
    return path


# =======================
# RECORD FIXTURES
# =======================

@pytest.fixture
def valid_record() -> dict:
    """Canonical record that passes strict validation."""
    return {
        "lat": 51.50,
        "lng": -0.12,
        "amenity": "toilets",
        "wheelchair": "yes",
        "access": "yes",
        "opening_hours": "24/7",
        "fee": False,
    }


@pytest.fixture
def legacy_record() -> dict:
    """Legacy (v1) submission as sent by older clients."""
    return {
        "lat": 51.5074,
        "lng": -0.1278,
        "name": "Test Toilet",
        "accessible": True,
        "hours": "09:00-17:00",
        "fee": 0.5,
        "payment_contactless": False,
    }


@pytest.fixture
def write_json(tmp_path):
    """
    Factory writing a JSON document to a temporary file

    Returns:
        Callable(name, document) -> Path
    """
    def _write(name: str, document) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


# =======================
# CONTEXT FIXTURES
# =======================

class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def metrics_settings() -> MetricsSettings:
    return MetricsSettings(enabled=True, detail_level="detailed", build_version="test")


@pytest.fixture
def context(metrics_settings, clock) -> ValidationContext:
    """
    Validation context on the packaged tier document with a fake clock

    Returns:
        ValidationContext
    """
    return ValidationContext.create(
        settings=metrics_settings,
        tier_config_path=DEFAULT_TIER_CONFIG_PATH,
        clock=clock,
    )
