import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from hifz.domain.constants import DEFAULT_NAMESPACE


class AppConfig(BaseSettings):
    """
    Configuration model for hifz.
    Supports loading from:
    1. Environment variables (HIFZ_*)
    2. Config file (~/.config/hifz/config.toml or ~/.hifz.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="HIFZ_",
        extra="ignore",
    )

    # Storage
    backend: Literal["json", "sqlite", "memory"] = "json"
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/hifz")
    namespace: str = DEFAULT_NAMESPACE
    seed_file: Path | None = None

    # Server
    host: str = "127.0.0.1"
    port: int = 8778

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Init kwargs (CLI overrides) win, then env, then the first existing TOML file.
        toml_file = next((f for f in _config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("seed_file", mode="before")
    @classmethod
    def resolve_seed_file(cls, v: Any) -> Path | None:
        if not v:
            return None
        return Path(v).expanduser().resolve()

    @property
    def json_path(self) -> Path:
        return self.data_dir / "srs.json"

    @property
    def sqlite_path(self) -> Path:
        return self.data_dir / "srs.sqlite3"


def _config_files() -> list[Path]:
    # Resolved at call time so a patched HOME is honoured.
    return [
        Path.home() / ".config/hifz/config.toml",
        Path.home() / ".hifz.toml",
    ]


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/hifz/config.toml (if exists)
    3. Environment variables (HIFZ_*)
    4. cli_overrides (passed from Typer), None values ignored
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)


def log_level(verbose: int) -> int:
    """Map the verbosity count to a level: 0 warnings only, 1 info, 2+ debug."""
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG
