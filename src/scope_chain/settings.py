"""Configuration management for scope-chain."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict, TomlConfigSettingsSource

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def _find_settings_toml(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for ``scope_chain.toml``."""
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / "scope_chain.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


class VectorSettings(BaseModel):
    """Full-text vector predicate defaults."""

    tsquery_function: str = Field(default="plainto_tsquery", description="Function turning a term into a tsquery.")
    language: str = Field(default="english", description="Text search configuration passed to the tsquery function.")
    column_name: str = Field(
        default="vector", description="Vector column name, qualified with the entity's table when no column is given."
    )


class TextSearchSettings(BaseModel):
    """Substring search settings."""

    case_insensitive: bool = Field(default=False, description="Use ILIKE instead of LIKE for substring matches.")
    escape_char: str = Field(default="\\", description="Escape character for LIKE wildcards in search terms.")


class ChainSettings(BaseSettings):
    """Root configuration for scope-chain."""

    model_config = SettingsConfigDict(
        toml_file="scope_chain.toml",
        env_prefix="SCOPE_CHAIN_",
        env_nested_delimiter="__",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_path = _find_settings_toml()
        sources: list[PydanticBaseSettingsSource] = [init_settings, env_settings]
        if toml_path:
            sources.append(TomlConfigSettingsSource(settings_cls, toml_file=toml_path))
        sources.append(file_secret_settings)
        return tuple(sources)

    vector: VectorSettings = Field(default_factory=VectorSettings)
    text: TextSearchSettings = Field(default_factory=TextSearchSettings)


@lru_cache(maxsize=1)
def get_settings() -> ChainSettings:
    """Process-wide settings, loaded once."""
    return ChainSettings()
