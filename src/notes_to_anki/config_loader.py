"""Config loading and the persistent settings store."""

from __future__ import annotations

import os
from io import StringIO
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

from .config_settings import SyncConfig
from .error_codes import ErrorCode
from .exceptions import ConfigurationError
from .utils.logging import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "NOTES_TO_ANKI_CONFIG"
DEFAULT_CONFIG_NAME = "notes-to-anki.yaml"

_config: SyncConfig | None = None


def _yaml() -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.default_flow_style = False
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def resolve_config_path(config_path: Path | None = None) -> Path:
    """Pick the config file location: explicit path, env variable, then cwd."""
    if config_path:
        return config_path.expanduser()
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_NAME


def _load_document(path: Path) -> CommentedMap:
    """Load the config file as a round-trip mapping (comments and order kept)."""
    if not path.exists():
        logger.debug("config_file_not_found", config_path=str(path))
        return CommentedMap()

    try:
        data = _yaml().load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, YAMLError) as e:
        logger.error(
            "config_yaml_load_error",
            config_path=str(path),
            error=str(e),
            error_type=type(e).__name__,
        )
        msg = f"Failed to parse config file: {path}"
        raise ConfigurationError(
            msg,
            suggestion=(
                "Check YAML syntax (indentation, colons, quotes). "
                "Validate file encoding is UTF-8. "
                f"Original error: {e}"
            ),
            error_code=ErrorCode.CFG_FILE_INVALID.value,
        ) from e

    if data is None:
        return CommentedMap()
    if not isinstance(data, dict):
        msg = f"Config file must contain a mapping, got {type(data).__name__}"
        raise ConfigurationError(msg, error_code=ErrorCode.CFG_FILE_INVALID.value)

    logger.debug("config_yaml_loaded", config_path=str(path), keys_count=len(data))
    return data


def _read_yaml(path: Path) -> dict[str, Any]:
    return {str(key): value for key, value in _load_document(path).items()}


def build_config(values: dict[str, Any]) -> SyncConfig:
    """Build a SyncConfig, converting pydantic failures to ConfigurationError."""
    try:
        return SyncConfig(**values)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        logger.error("config_validation_error", error=errors)
        msg = f"Invalid configuration: {errors}"
        raise ConfigurationError(
            msg, suggestion="Fix the listed settings and retry."
        ) from e


def load_config(config_path: Path | None = None) -> SyncConfig:
    """Load configuration from a YAML file and NOTES_TO_ANKI_* environment variables.

    Values in the YAML file take precedence over environment variables.
    """
    path = resolve_config_path(config_path)
    config = build_config(_read_yaml(path))
    logger.debug(
        "config_loaded",
        config_path=str(path),
        deck=config.deck_name,
        model=config.note_type_name,
    )
    return config


class SettingsStore:
    """Typed settings accessor backed by a YAML file.

    ``get`` returns the current immutable snapshot; ``update`` validates the
    changed values, persists them and returns the new snapshot.
    """

    def __init__(self, path: Path | None = None):
        self.path = resolve_config_path(path)
        self._current: SyncConfig | None = None

    def get(self) -> SyncConfig:
        if self._current is None:
            self._current = build_config(_read_yaml(self.path))
        return self._current

    def update(self, **changes: Any) -> SyncConfig:
        unknown = sorted(set(changes) - set(SyncConfig.model_fields))
        if unknown:
            msg = f"Unknown setting(s): {', '.join(unknown)}"
            raise ConfigurationError(
                msg,
                suggestion=f"Valid settings: {', '.join(SyncConfig.model_fields)}",
                error_code=ErrorCode.CFG_MISSING_KEY.value,
            )

        document = _load_document(self.path)
        merged = {**{str(key): value for key, value in document.items()}, **changes}
        new_config = build_config(merged)

        # Persist validated values so "30" or "false" are stored typed.
        dumped = new_config.model_dump(mode="json")
        for key in changes:
            document[key] = dumped[key]
        buffer = StringIO()
        _yaml().dump(document, buffer)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(buffer.getvalue(), encoding="utf-8")

        self._current = new_config
        logger.info(
            "config_saved", config_path=str(self.path), fields=sorted(changes)
        )
        return new_config


def get_config() -> SyncConfig:
    """Get singleton config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: SyncConfig) -> None:
    """Set singleton config instance (for testing)."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset global config instance (for testing only)."""
    global _config
    _config = None
