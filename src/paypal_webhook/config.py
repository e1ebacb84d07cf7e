"""クライアント設定（pydantic BaseModel）と YAML ローダー"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import PayPalError, PayPalErrorCodes

API_BASE_SANDBOX = "https://api-m.sandbox.paypal.com"
API_BASE_LIVE = "https://api-m.paypal.com"


class ClientConfig(BaseModel):
    """PayPal API クライアント設定。生成後は変更不可。"""

    model_config = ConfigDict(frozen=True)

    client_id: str
    secret: str
    api_base: str = API_BASE_SANDBOX
    timeout_seconds: float = Field(default=30.0, gt=0)
    token_refresh_margin_seconds: float = Field(default=60.0, ge=0)


class LogConfig(BaseModel):
    """ログ設定。"""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"


class AppConfig(BaseModel):
    """設定ファイル全体。"""

    paypal: ClientConfig
    log: LogConfig = Field(default_factory=LogConfig)


def _read_yaml(path: Path) -> dict[str, Any]:
    """YAML ファイルを読み込む。"""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise PayPalError(
            code=PayPalErrorCodes.CONFIG_READ,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise PayPalError(
            code=PayPalErrorCodes.CONFIG_PARSE,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    return data


def load_config(path: Path) -> AppConfig:
    """設定ファイルを読み込んで AppConfig を返す。"""
    data = _read_yaml(path)
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise PayPalError(
            code=PayPalErrorCodes.CONFIG_VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
