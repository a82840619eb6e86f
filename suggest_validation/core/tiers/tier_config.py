"""
Tier configuration management.

Loads the tier document (YAML or JSON), validates it against the structural
schema and caches the result for the life of the store.
"""

import asyncio
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from suggest_validation.core.exceptions import ConfigError
from suggest_validation.core.models import (
    CORE,
    HIGH_FREQUENCY,
    OPTIONAL,
    SPECIALIZED,
    TierConfig,
)
from suggest_validation.observability.logger import get_logger, log_operation

logger = get_logger(__name__)

DEFAULT_TIER_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "suggest_property_tiers.yaml"


def default_tier_config_path() -> Path:
    """Tier document path from TIER_CONFIG, else the packaged default."""
    return Path(os.getenv("TIER_CONFIG", str(DEFAULT_TIER_CONFIG_PATH)))


def parse_tier_config(document: Any, source: str | None = None) -> TierConfig | ConfigError:
    """
    Validate an already-parsed tier document.

    Args:
        document: Parsed YAML/JSON content
        source: Where the document came from (for error messages)

    Returns:
        TierConfig, or a ConfigError describing every structural problem
    """
    if not isinstance(document, dict):
        return ConfigError("Tier configuration must be a mapping", source)

    for section in ("tiers", "properties"):
        if section not in document:
            return ConfigError(f"Tier configuration must contain '{section}' section", source)

    try:
        return TierConfig.model_validate(document)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        return ConfigError(f"Invalid tier configuration: {problems}", source)


def load_tier_config(path: str | Path) -> TierConfig | ConfigError:
    """
    Read and validate a tier document from disk.

    Never raises for a missing or malformed document; the problem is
    returned as a ConfigError value.

    Args:
        path: Path to a YAML or JSON tier document

    Returns:
        TierConfig or ConfigError
    """
    config_path = Path(path)
    if not config_path.exists():
        return ConfigError("Tier configuration file not found", str(config_path))

    try:
        with open(config_path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        return ConfigError(f"Failed to read tier configuration: {e}", str(config_path))

    return parse_tier_config(document, str(config_path))


class TierConfigStore:
    """
    Loads the tier configuration once and hands out the cached value.

    Concurrent first callers share a single load; a failed load raises
    ConfigError to the caller and leaves nothing cached.
    """

    def __init__(self, source: str | Path | None = None):
        """
        Args:
            source: Tier document path (defaults to TIER_CONFIG or the packaged file)
        """
        self.source = Path(source) if source is not None else default_tier_config_path()
        self._config: TierConfig | None = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._config is not None

    async def load(self) -> TierConfig:
        """
        Load the tier configuration, reusing the cached value when present.

        Raises:
            ConfigError: If the document is missing or structurally invalid
        """
        if self._config is not None:
            return self._config

        async with self._lock:
            if self._config is None:
                self._config = await self._read()
        return self._config

    async def reload(self) -> TierConfig:
        """
        Re-read and re-validate the document.

        The previous configuration stays in place if the new one is invalid.

        Raises:
            ConfigError: If the document is missing or structurally invalid
        """
        async with self._lock:
            self._config = await self._read()
        return self._config

    def get(self) -> TierConfig:
        """
        Return the loaded configuration.

        Raises:
            ConfigError: If load() has not completed successfully
        """
        if self._config is None:
            raise ConfigError("Tier configuration not loaded", str(self.source))
        return self._config

    async def _read(self) -> TierConfig:
        with log_operation("Loading tier configuration", logger=logger, source=str(self.source)):
            result = await asyncio.to_thread(load_tier_config, self.source)
            if isinstance(result, ConfigError):
                raise result

        logger.info(
            "Tier configuration loaded",
            extra={
                "version": result.version,
                "property_count": len(result.properties),
                "core_property_count": len(result.core_properties),
            },
        )
        return result


class TierConfigBuilder:
    """
    Programmatically build tier configurations (for tests or embedding).
    """

    DEFAULT_TIERS = {
        CORE: {
            "description": "Essential properties that directly impact user decisions",
            "ui_behavior": "Always visible",
            "validation_requirement": "Required, strict validation",
            "strict_validation": True,
            "required": True,
        },
        HIGH_FREQUENCY: {
            "description": "Common properties that enhance user experience",
            "ui_behavior": "Visible by default",
            "validation_requirement": "Strict validation when provided",
            "strict_validation": True,
            "required": False,
        },
        OPTIONAL: {
            "description": "Advanced properties for power users",
            "ui_behavior": "Hidden behind advanced toggle",
            "validation_requirement": "Validated if provided",
            "strict_validation": False,
            "required": False,
        },
        SPECIALIZED: {
            "description": "Edge case properties for data completeness",
            "ui_behavior": "Not shown in UI",
            "validation_requirement": "Basic type checking only",
            "strict_validation": False,
            "required": False,
        },
    }

    def __init__(self, version: str = "1.0.0"):
        self.version = version
        self.tiers: dict[str, dict[str, Any]] = {name: dict(tier) for name, tier in self.DEFAULT_TIERS.items()}
        self.properties: dict[str, dict[str, Any]] = {}

    def add_property(
        self,
        name: str,
        tier: str,
        validation_type: str,
        frequency: int = 0,
        synthetic: bool = False,
    ) -> "TierConfigBuilder":
        """Add a property definition."""
        entry: dict[str, Any] = {"tier": tier, "validationType": validation_type, "frequency": frequency}
        if synthetic:
            entry["synthetic"] = True
        self.properties[name] = entry
        return self

    def core_strict(self, strict: bool) -> "TierConfigBuilder":
        """Set the core tier's strict_validation flag."""
        self.tiers[CORE]["strict_validation"] = strict
        return self

    def build_document(self) -> dict[str, Any]:
        """Return the raw document, as it would appear on disk."""
        return {
            "version": self.version,
            "source": "builder",
            "tiers": {name: dict(tier) for name, tier in self.tiers.items()},
            "properties": {name: dict(prop) for name, prop in self.properties.items()},
        }

    def build(self) -> TierConfig:
        """
        Build a validated TierConfig.

        Raises:
            ConfigError: If the definitions are structurally invalid
        """
        result = parse_tier_config(self.build_document(), "builder")
        if isinstance(result, ConfigError):
            raise result
        return result
