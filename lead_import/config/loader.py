from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import DatabaseConfig, ImportConfig, SupabaseConfig

"""Config loader.

Responsibilities:
- Load YAML config (config/import.yml by default)
- Validate against the bundled config_schema.json
- Apply defaults for every optional key
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (wrong types, unknown keys, bad enum
            values).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    db_raw = data.get("database", {})
    sb_raw = data.get("supabase", {})
    sentinels = frozenset(s.strip().upper() for s in data.get("null_sentinels", []))
    return ImportConfig(
        backend=data.get("backend", "postgres"),
        table=data.get("table", "leads"),
        initial_status=data.get("initial_status", "new_lead"),
        null_sentinels=sentinels,
        error_display_limit=data.get("error_display_limit", 20),
        database=DatabaseConfig(
            host=db_raw.get("host"),
            port=db_raw.get("port"),
            user=db_raw.get("user"),
            password=db_raw.get("password"),
            database=db_raw.get("database"),
            dsn=db_raw.get("dsn"),
        ),
        supabase=SupabaseConfig(url=sb_raw.get("url"), key=sb_raw.get("key")),
    )
