"""
PlotNFT Configuration System

Configuration management with YAML files, environment variables and
validation.

Configuration Sources (in order of precedence):
    1. Environment variables (PLOTNFT_*)
    2. Runtime overrides and loaded YAML files
    3. Default values

YAML files are checked against ``schemas/config.schema.json`` before any
value is applied, so a rejected file leaves the configuration unchanged.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

import yaml
from jsonschema import Draft202012Validator

T = TypeVar("T")

SCHEMA_PATH = Path(__file__).resolve().parent / "schemas" / "config.schema.json"

DEFAULT_CONTRACT_OWNER = "ST1TEST"
DEFAULT_BURN_ADDRESS = "SP000000000000000000002Q6VF78"


class ConfigError(Exception):
    """Configuration error."""
    pass


class ConfigValidationError(ConfigError):
    """Configuration validation error."""
    pass


@dataclass
class ConfigValue(Generic[T]):
    """
    A single configuration value with metadata.

    Supports default values, environment variable binding and validation.
    """
    default: T
    env_var: Optional[str] = None
    description: str = ""
    validator: Optional[Callable[[T], bool]] = None
    _value: Optional[T] = field(default=None, repr=False)

    def get(self) -> T:
        """Get the current value."""
        if self.env_var and self.env_var in os.environ:
            value = self._coerce(os.environ[self.env_var])
            if self.validator and not self.validator(value):
                raise ConfigValidationError(f"{self.env_var}: invalid value {value!r}")
            return value
        return self._value if self._value is not None else self.default

    def set(self, value: T) -> None:
        """Set the value with validation."""
        if self.validator and not self.validator(value):
            raise ConfigValidationError(f"Invalid value for config: {value!r}")
        self._value = value

    def reset(self) -> None:
        self._value = None

    def _coerce(self, value: str) -> T:
        """Coerce string value to target type."""
        target_type = type(self.default)

        if target_type == bool:
            return value.lower() in ("true", "1", "yes", "on")  # type: ignore
        elif target_type == int:
            try:
                return int(value)  # type: ignore
            except ValueError as e:
                raise ConfigValidationError(f"{self.env_var}: expected integer, got {value!r}") from e
        return value  # type: ignore


def _is_principal(value: Any) -> bool:
    return isinstance(value, str) and 0 < len(value) <= 256


@dataclass
class RegistryConfig:
    """Defaults for new registry instances."""
    max_tokens: ConfigValue[int] = field(default_factory=lambda: ConfigValue(
        default=10000,
        env_var="PLOTNFT_MAX_TOKENS",
        description="Maximum number of plot tokens that can be minted",
        validator=lambda x: isinstance(x, int) and not isinstance(x, bool) and x > 0,
    ))
    mint_fee: ConfigValue[int] = field(default_factory=lambda: ConfigValue(
        default=500,
        env_var="PLOTNFT_MINT_FEE",
        description="Fee paid to the authority on every mint",
        validator=lambda x: isinstance(x, int) and not isinstance(x, bool) and x >= 0,
    ))
    contract_owner: ConfigValue[str] = field(default_factory=lambda: ConfigValue(
        default=DEFAULT_CONTRACT_OWNER,
        env_var="PLOTNFT_CONTRACT_OWNER",
        description="Principal allowed to change registry settings",
        validator=_is_principal,
    ))
    burn_address: ConfigValue[str] = field(default_factory=lambda: ConfigValue(
        default=DEFAULT_BURN_ADDRESS,
        env_var="PLOTNFT_BURN_ADDRESS",
        description="Reserved null principal that can never become the authority",
        validator=_is_principal,
    ))


@dataclass
class ObservabilityConfig:
    """Configuration for logging and auditing."""
    log_level: ConfigValue[str] = field(default_factory=lambda: ConfigValue(
        default="info",
        env_var="PLOTNFT_LOG_LEVEL",
        description="Log level (debug, info, warning, error, critical)",
        validator=lambda x: x in ("debug", "info", "warning", "error", "critical"),
    ))
    log_format: ConfigValue[str] = field(default_factory=lambda: ConfigValue(
        default="json",
        env_var="PLOTNFT_LOG_FORMAT",
        description="Log format (json, text)",
        validator=lambda x: x in ("json", "text"),
    ))
    audit_enabled: ConfigValue[bool] = field(default_factory=lambda: ConfigValue(
        default=True,
        env_var="PLOTNFT_AUDIT_ENABLED",
        description="Record a hash-chained audit entry for every registry call",
        validator=lambda x: isinstance(x, bool),
    ))


@dataclass
class PlotNFTConfig:
    """Root configuration."""
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    def to_dict(self) -> Dict[str, Any]:
        def extract_values(obj: Any) -> Any:
            if isinstance(obj, ConfigValue):
                return obj.get()
            elif hasattr(obj, "__dataclass_fields__"):
                return {k: extract_values(getattr(obj, k)) for k in obj.__dataclass_fields__}
            return obj

        return extract_values(self)

    def to_yaml(self) -> str:
        return yaml.dump(self.to_dict(), default_flow_style=False)


def config_validator() -> Draft202012Validator:
    schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    return Draft202012Validator(schema)


def validate_config_data(data: Any) -> List[str]:
    """Return schema violations for a raw configuration mapping."""
    validator = config_validator()
    errors = []
    for e in sorted(validator.iter_errors(data), key=str):
        errors.append(f"{list(e.absolute_path)}: {e.message}")
    return errors


class ConfigManager:
    """
    Configuration manager with file loading and environment binding.

    Thread-safe singleton that manages configuration lifecycle.
    """

    _instance: Optional["ConfigManager"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "ConfigManager":
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
            return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._config = PlotNFTConfig()
        self._config_paths: List[Path] = []
        self._initialized = True

    @property
    def config(self) -> PlotNFTConfig:
        return self._config

    @property
    def config_paths(self) -> List[Path]:
        return list(self._config_paths)

    def load_from_file(self, path: Union[str, Path]) -> None:
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if not data:
            return

        from plotnft.observability import Component, get_logger

        logger = get_logger("loader", Component.CONFIG)
        errors = validate_config_data(data)
        if errors:
            logger.error("configuration rejected", error_code="SCHEMA", path=str(path), errors=errors)
            raise ConfigValidationError(f"invalid configuration: {path}: {errors[0]}")

        self.apply_dict(data)
        self._config_paths.append(path)
        logger.info("configuration loaded", path=str(path))

    def apply_dict(self, data: Dict[str, Any]) -> None:
        """Apply nested dictionary values to configuration."""
        def apply_to_config(config_obj: Any, values: Dict[str, Any]) -> None:
            for key, value in values.items():
                if hasattr(config_obj, key):
                    attr = getattr(config_obj, key)
                    if isinstance(attr, ConfigValue):
                        attr.set(value)
                    elif hasattr(attr, "__dataclass_fields__") and isinstance(value, dict):
                        apply_to_config(attr, value)

        apply_to_config(self._config, data)

    def set(self, path: str, value: Any) -> None:
        """
        Set a configuration value by path.

        Example: manager.set("registry.mint_fee", 1000)
        """
        parts = path.split(".")
        obj: Any = self._config

        try:
            for part in parts[:-1]:
                obj = getattr(obj, part)
            attr = getattr(obj, parts[-1])
        except AttributeError as e:
            raise ConfigError(f"Invalid config path: {path}") from e

        if not isinstance(attr, ConfigValue):
            raise ConfigError(f"Invalid config path: {path}")
        attr.set(value)

    def get(self, path: str) -> Any:
        """
        Get a configuration value by path.

        Example: manager.get("registry.max_tokens")
        """
        obj: Any = self._config
        try:
            for part in path.split("."):
                obj = getattr(obj, part)
        except AttributeError as e:
            raise ConfigError(f"Invalid config path: {path}") from e

        if isinstance(obj, ConfigValue):
            return obj.get()
        return obj

    def validate(self) -> List[str]:
        """
        Validate all effective configuration values.

        Returns list of validation errors.
        """
        errors: List[str] = []

        def validate_config(obj: Any, path: str = "") -> None:
            if isinstance(obj, ConfigValue):
                try:
                    value = obj.get()
                    if obj.validator and not obj.validator(value):
                        errors.append(f"{path}: validation failed for value {value!r}")
                except ConfigError as e:
                    errors.append(f"{path}: {e}")
            elif hasattr(obj, "__dataclass_fields__"):
                for field_name in obj.__dataclass_fields__:
                    field_path = f"{path}.{field_name}" if path else field_name
                    validate_config(getattr(obj, field_name), field_path)

        validate_config(self._config)
        return errors

    def reset(self) -> None:
        """Drop runtime overrides and loaded files, returning to defaults."""
        self._config = PlotNFTConfig()
        self._config_paths = []


def get_config() -> PlotNFTConfig:
    """Get the current configuration."""
    return ConfigManager().config


def get_config_manager() -> ConfigManager:
    """Get the configuration manager instance."""
    return ConfigManager()
