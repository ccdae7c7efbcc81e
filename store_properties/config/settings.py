"""Settings with Pydantic Settings validation.

Values come from environment variables (or a ``.env`` file) and from
``config/*.yaml`` files. YAML files are merged and validated against
JSON schemas in ``config/schemas/`` when present. Environment values win
over YAML values.
"""

import json
from pathlib import Path
from typing import Any, Final, cast

import yaml
from jsonschema import ValidationError as JSONSchemaValidationError
from jsonschema import validate
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from store_properties.config.logging_config import get_logger
from store_properties.domain.models import JobPriorityLevel
from store_properties.domain.priority_constants import (
    PRIORITY_HIGHEST,
    PRIORITY_LOWEST,
    PRIORITY_NORMAL,
)
from store_properties.services.ordering_keys import OrderingKeyList
from store_properties.services.priority_scale import level_of, parse_priority

CONFIG_DIR: Final[str] = "config"
SCHEMA_DIR: Final[str] = "config/schemas"
MAIN_CONFIG_NAME: Final[str] = "main"

logger = cast(Any, get_logger(__name__))


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Overlay ``override`` on ``base`` section by section.

    Nested sections such as ``priority`` are merged key by key, so a later
    file may change ``priority.predefined_only`` and keep
    ``priority.default``. Neither input is modified.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = deep_merge(current, value)
        merged[key] = value
    return merged


def load_schema(schema_name: str) -> dict[str, Any]:
    """Schema for ``config/<schema_name>.yaml``, or ``{}`` when there is none.

    An unreadable schema file is logged and treated as missing.
    """
    schema_path = Path(SCHEMA_DIR) / f"{schema_name}.schema.json"
    if not schema_path.is_file():
        return {}

    try:
        return json.loads(schema_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("config_schema_load_failed", schema=schema_name, error=str(e))
        return {}


def validate_config_section(
    config: dict[str, Any], schema_name: str, file_path: str = ""
) -> None:
    """Check one parsed YAML file against its schema, if it has one.

    Raises:
        ValueError: Naming the schema, the file (when given) and the first
            violation, e.g. an unknown key under ``priority``
    """
    schema = load_schema(schema_name)
    if not schema:
        return

    try:
        validate(instance=config, schema=schema)
    except JSONSchemaValidationError as e:
        location = f" (file: {file_path})" if file_path else ""
        raise ValueError(
            f"Config validation failed for {schema_name}{location}: {e.message}"
        ) from e
    logger.debug("config_validation_succeeded", schema=schema_name)


def load_all_configs() -> dict[str, Any]:
    """Load and merge all YAML configs from config/.

    ``config/main.yaml`` is loaded first, then every other ``*.yaml`` in
    alphabetical order, later files overriding earlier ones. Each file is
    validated against the schema named after its stem.

    Returns:
        Merged configuration dictionary

    Raises:
        ValueError: If a file fails schema validation
    """
    config_dir = Path(CONFIG_DIR)
    if not config_dir.is_dir():
        return {}

    main_path = config_dir / f"{MAIN_CONFIG_NAME}.yaml"
    yaml_files = sorted(f for f in config_dir.glob("*.yaml") if f != main_path)
    if main_path.exists():
        yaml_files.insert(0, main_path)

    merged_config: dict[str, Any] = {}
    for yaml_file in yaml_files:
        schema_name = yaml_file.stem
        try:
            with open(yaml_file, encoding="utf-8") as f:
                file_config = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            logger.warning(
                "config_file_load_failed",
                path=str(yaml_file),
                error=str(e),
            )
            continue

        try:
            validate_config_section(file_config, schema_name, str(yaml_file))
        except ValueError as e:
            logger.error(
                "config_validation_failed",
                path=str(yaml_file),
                schema=schema_name,
                error=str(e),
            )
            raise

        merged_config = deep_merge(merged_config, file_config)
        logger.debug("config_file_loaded", path=str(yaml_file), schema=schema_name)

    logger.debug("config_load_complete", file_count=len(yaml_files))
    return merged_config


def _expanded_priority_value(value: Any) -> Any:
    # Text such as "Normal+100" is accepted wherever an int is
    if isinstance(value, str):
        return parse_priority(value.strip())
    return value


def _canonical_order_by(value: str) -> str:
    parsed = OrderingKeyList.parse(value)
    if parsed is None:
        raise ValueError(f"Invalid order-by value: {value!r}")
    return str(parsed)


class Settings(BaseSettings):
    """Library settings.

    Environment variables are read case-insensitively, e.g.
    ``DEFAULT_EXPANDED_PRIORITY=Normal+100``.
    """

    model_config = SettingsConfigDict(
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Observability
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    # Priority
    default_expanded_priority: int = Field(
        default=PRIORITY_NORMAL,
        ge=PRIORITY_LOWEST,
        le=PRIORITY_HIGHEST,
        description="Expanded priority used when a job does not set one",
    )
    predefined_priority_only: bool = Field(
        default=True,
        description="Only accept expanded priorities that sit exactly on a level",
    )

    # Node ordering
    default_order_by: str = Field(
        default="",
        description="Order-by text used when a job does not set one",
    )

    @field_validator("default_expanded_priority", mode="before")
    @classmethod
    def _parse_priority_text(cls, value: Any) -> Any:
        return _expanded_priority_value(value)

    @field_validator("default_order_by")
    @classmethod
    def _validate_order_by(cls, value: str) -> str:
        return _canonical_order_by(value)

    def __init__(self, **data: Any):
        """Initialize settings with auto-loaded configs from all YAML files."""
        config = load_all_configs()

        super().__init__(**data)
        self._apply_yaml_defaults(config)

    def _apply_yaml_defaults(self, config: dict[str, Any]) -> None:
        """Apply YAML-sourced defaults without overriding env-provided values."""

        fields_from_env = set(self.model_fields_set)

        def _assign(field_name: str, value: Any) -> None:
            if value is None:
                return
            if field_name in fields_from_env:
                return

            object.__setattr__(self, field_name, value)
            self.model_fields_set.add(field_name)

        logging_config = config.get("logging") or {}
        _assign("log_level", logging_config.get("level"))
        _assign("json_logs", logging_config.get("json"))

        priority_config = config.get("priority") or {}
        default_priority = priority_config.get("default")
        if default_priority is not None:
            default_priority = _expanded_priority_value(default_priority)
            if not PRIORITY_LOWEST <= default_priority <= PRIORITY_HIGHEST:
                raise ValueError(
                    f"priority.default must be between {PRIORITY_LOWEST} and "
                    f"{PRIORITY_HIGHEST}, got {default_priority}"
                )
        _assign("default_expanded_priority", default_priority)
        _assign("predefined_priority_only", priority_config.get("predefined_only"))

        ordering_config = config.get("ordering") or {}
        default_order_by = ordering_config.get("default_order_by")
        if default_order_by is not None:
            default_order_by = _canonical_order_by(default_order_by)
        _assign("default_order_by", default_order_by)

    def default_priority_level(self) -> JobPriorityLevel:
        """Legacy level of the default expanded priority."""
        return level_of(self.default_expanded_priority)

    def default_order_by_list(self) -> OrderingKeyList:
        """Fresh key list built from ``default_order_by``."""
        return OrderingKeyList.parse(self.default_order_by) or OrderingKeyList()


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings instance (tests, config reloads)."""
    global _settings
    _settings = None
