"""プロバイダー設定（pydantic BaseModel）と YAML 読み込み"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError, ProviderErrorCodes


class LogSection(BaseModel):
    """ログ設定。"""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"


class ImpressionsSection(BaseModel):
    """インプレッション送信設定。"""

    url: str
    api_token: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0)
    max_buffer_size: int = Field(default=30000, ge=1)


class ProviderConfig(BaseModel):
    """プロバイダー設定全体。"""

    name: str = "k1s0"
    log: LogSection = Field(default_factory=LogSection)
    impressions: ImpressionsSection | None = None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            code=ProviderErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            code=ProviderErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    return data


def load_config(path: Path) -> ProviderConfig:
    """設定ファイルを読み込んで ProviderConfig を返す。"""
    data = _read_yaml(path)
    try:
        return ProviderConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            code=ProviderErrorCodes.VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
