"""Settings model for notes-to-anki."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import httpx
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .error_codes import ErrorCode
from .exceptions import ConfigurationError


class SyncConfig(BaseSettings):
    """Sync configuration using pydantic-settings.

    Instances are immutable: a sync operation works on the snapshot it was
    given, and changes go through ``SettingsStore.update`` which builds a new one.
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTES_TO_ANKI_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # AnkiConnect
    anki_connect_url: str = Field(
        default="http://127.0.0.1:8765", description="AnkiConnect URL"
    )
    anki_connect_timeout: float = Field(
        default=30.0, gt=0, description="AnkiConnect request timeout in seconds"
    )

    # Anki targets
    deck_name: str = Field(
        default="Obsidian articles", description="Anki deck to add notes to"
    )
    create_deck_if_not_found: bool = Field(
        default=True, description="Create the deck automatically when missing"
    )
    note_type_name: str = Field(
        default="obsidian-articles", description="Anki note type used for synced notes"
    )
    create_note_type_if_not_found: bool = Field(
        default=True, description="Create the note type automatically when missing"
    )

    # Field sources
    guid_property: str = Field(
        default="citation key",
        description="Frontmatter property holding the note identity",
    )
    property_names: list[str] = Field(
        default_factory=lambda: ["title", "authors", "journal", "year"],
        description="Frontmatter properties copied to Anki fields",
    )
    callouts: list[str] = Field(
        default_factory=lambda: ["summary"],
        description='Callout labels (e.g. "summary" for > [!summary]) copied to Anki fields',
    )
    callout_format: Literal["text", "html"] = Field(
        default="text", description="Rendering of callout bodies: plain text or HTML"
    )

    # Bulk sync filters
    tags_to_include: list[str] = Field(
        default_factory=list, description="Only sync notes carrying one of these tags"
    )
    tags_to_exclude: list[str] = Field(
        default_factory=list, description="Never sync notes carrying one of these tags"
    )

    # Vault and logging
    vault_path: Path = Field(default=Path(), description="Root directory of the notes")
    log_level: str = Field(default="INFO", description="Console log level")
    log_dir: Path | None = Field(
        default=None, description="Directory for the JSON log file"
    )

    @field_validator("anki_connect_url")
    @classmethod
    def validate_anki_connect_url(cls, v: str) -> str:
        """Require an absolute http(s) URL that httpx can parse."""
        v = v.strip()
        try:
            url = httpx.URL(v)
        except (httpx.InvalidURL, ValueError) as e:
            msg = f"Invalid anki_connect_url: {v!r} ({e})"
            raise ConfigurationError(
                msg,
                suggestion="Use a URL like http://127.0.0.1:8765",
                error_code=ErrorCode.CFG_INVALID.value,
                context={"setting": "anki_connect_url", "value": v},
            ) from e

        if url.scheme not in {"http", "https"} or not url.host:
            msg = f"anki_connect_url must be an http(s) URL with a host, got {v!r}"
            raise ConfigurationError(
                msg,
                suggestion="Use a URL like http://127.0.0.1:8765",
                error_code=ErrorCode.CFG_INVALID.value,
                context={"setting": "anki_connect_url", "value": v},
            )
        return v

    @field_validator("deck_name", "note_type_name", "guid_property", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        """Strip surrounding whitespace from names."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator(
        "property_names", "callouts", "tags_to_include", "tags_to_exclude", mode="before"
    )
    @classmethod
    def parse_name_list(cls, v: Any) -> list[str]:
        """Accept a comma separated string or a list and strip each entry."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",") if v.strip() else []
        if isinstance(v, (list, tuple)):
            return [str(item).strip() for item in v]
        msg = f"Expected a list of names, got {type(v).__name__}"
        raise ValueError(msg)

    @field_validator("tags_to_include", "tags_to_exclude")
    @classmethod
    def strip_tag_markers(cls, v: list[str]) -> list[str]:
        """Drop '#' markers and blank tags."""
        return [tag.lstrip("#") for tag in v if tag.lstrip("#")]

    @field_validator("vault_path", mode="before")
    @classmethod
    def parse_vault_path(cls, v: Any) -> Path:
        """Convert string to Path for vault_path."""
        if v is None or v == "":
            return Path()
        if isinstance(v, (str, Path)):
            return Path(v).expanduser()
        msg = f"vault_path must be string or Path, got {type(v).__name__}"
        raise ValueError(msg)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            msg = f"Invalid log_level: {v}. Must be one of: {', '.join(sorted(valid_levels))}"
            raise ValueError(msg)
        return v.upper()

    @model_validator(mode="after")
    def validate_config(self) -> SyncConfig:
        """Validate required names and field-name disjointness."""
        for name in ("deck_name", "note_type_name", "guid_property"):
            if not getattr(self, name):
                msg = f"{name} must not be blank"
                raise ConfigurationError(
                    msg,
                    suggestion=f"Set {name} in the config file or NOTES_TO_ANKI_{name.upper()}",
                    error_code=ErrorCode.CFG_MISSING_KEY.value,
                    context={"setting": name},
                )

        for list_name in ("property_names", "callouts"):
            values = getattr(self, list_name)
            if any(not value for value in values):
                msg = f"{list_name} contains a blank entry"
                raise ConfigurationError(
                    msg,
                    suggestion=f"Remove empty items from {list_name}",
                    context={"setting": list_name, "value": values},
                )

        # Anki compares field names case-insensitively
        seen: dict[str, tuple[str, str]] = {}
        for source, name in self._field_sources():
            key = name.casefold()
            if key in seen:
                other_source, other_name = seen[key]
                msg = (
                    f"Field name '{name}' ({source}) collides with "
                    f"'{other_name}' ({other_source})"
                )
                raise ConfigurationError(
                    msg,
                    suggestion=(
                        "Anki field names must be unique. Rename the property or "
                        "callout, or remove the duplicate entry."
                    ),
                    error_code=ErrorCode.CFG_FIELD_COLLISION.value,
                    context={"field": name},
                )
            seen[key] = (source, name)

        return self

    def _field_sources(self) -> list[tuple[str, str]]:
        return [
            ("guid_property", self.guid_property),
            *(("property_names", name) for name in self.property_names),
            *(("callouts", label) for label in self.callouts),
        ]

    @property
    def desired_fields(self) -> list[str]:
        """Ordered Anki field list; the identity field always comes first."""
        return [name for _, name in self._field_sources()]

    @property
    def include_tags(self) -> list[str]:
        return [tag.lower() for tag in self.tags_to_include]

    @property
    def exclude_tags(self) -> list[str]:
        return [tag.lower() for tag in self.tags_to_exclude]
