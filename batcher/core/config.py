"""batcher.core.config

Two config surfaces only:
1) `config/default.yaml` + optional `config/user.yaml` overlay
2) Environment variables (`BATCHER_` prefix, `__` for nesting); env beats YAML

Everything else is derived.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from batcher.core.exceptions import ConfigError


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


class TradingPairConfig(BaseModel):
    """One market to sweep. YAML may use `[exchange, currency, asset]`."""

    exchange: str
    currency: str
    asset: str

    @model_validator(mode="before")
    @classmethod
    def accept_triple(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise ValueError(f"trading pair must be [exchange, currency, asset], got {list(data)}")
            exchange, currency, asset = data
            return {"exchange": exchange, "currency": currency, "asset": asset}
        return data


class DateRangeConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str


class SweepConfig(BaseModel):
    candle_sizes: list[int] = [60]
    history_sizes: list[int] = [10]
    trading_pairs: list[TradingPairConfig] = Field(
        default_factory=lambda: [TradingPairConfig(exchange="binance", currency="usdt", asset="btc")]
    )
    methods: list[str] = ["RSI"]
    daterange: DateRangeConfig = Field(
        default_factory=lambda: DateRangeConfig(from_="2018-01-01 00:00", to="2018-02-01 00:00")
    )
    parallel_queries: int = 5
    shuffle: bool = False

    @field_validator("candle_sizes", "history_sizes", "trading_pairs", "methods")
    @classmethod
    def dimension_cannot_be_empty(cls, v: list[Any]) -> list[Any]:
        if not v:
            raise ValueError("sweep dimension must have at least one value")
        return v

    @field_validator("parallel_queries")
    @classmethod
    def parallel_queries_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("parallel_queries must be >= 1")
        return v


class ServiceConfig(BaseModel):
    api_url: str = "http://localhost:3000"
    gekko_path: Path = Path("../gekko")
    timeout_s: float | None = None
    max_response_bytes: int = 16 * 1024 * 1024

    @property
    def strategies_dir(self) -> Path:
        return self.gekko_path / "config" / "strategies"


class ResultsConfig(BaseModel):
    dir: Path = Path("results")
    filename: str = "batch.csv"
    top_n: int = 100

    @field_validator("top_n")
    @classmethod
    def top_n_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("top_n must be >= 1")
        return v

    @property
    def path(self) -> Path:
        return self.dir / self.filename


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False


class Config(BaseSettings):
    """Root configuration. Single source of truth."""

    sweep: SweepConfig = Field(default_factory=SweepConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    results: ResultsConfig = Field(default_factory=ResultsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"env_prefix": "BATCHER_", "env_nested_delimiter": "__"}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML arrives as init kwargs; env vars must still win over it
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, Any]:
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Config file unreadable: {path} ({e})") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file must contain a mapping: {path}")
        return raw

    @classmethod
    def _build(cls, raw: dict[str, Any], *, source: Path) -> Config:
        try:
            return cls(**raw)
        except ValidationError as e:
            raise ConfigError(f"Invalid config in {source}: {e}") from e

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        return cls._build(cls._read_yaml(path), source=path)

    @classmethod
    def from_repo_defaults(cls, repo_root: Path | None = None) -> Config:
        root = repo_root or Path.cwd()
        default_path = root / "config" / "default.yaml"
        if not default_path.exists():
            raise ConfigError(f"Config file not found: {default_path}")

        raw = cls._read_yaml(default_path)
        user_path = root / "config" / "user.yaml"
        if user_path.exists():
            raw = _deep_merge(raw, cls._read_yaml(user_path))
        return cls._build(raw, source=default_path)
