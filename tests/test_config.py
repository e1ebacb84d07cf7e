"""設定とローダーのユニットテスト"""

from pathlib import Path

import pytest
from paypal_webhook.config import API_BASE_LIVE, API_BASE_SANDBOX, ClientConfig, load_config
from paypal_webhook.exceptions import PayPalError, PayPalErrorCodes
from pydantic import ValidationError


def test_client_config_defaults() -> None:
    """既定値は sandbox と 30 秒タイムアウト。"""
    config = ClientConfig(client_id="id", secret="secret")
    assert config.api_base == API_BASE_SANDBOX
    assert config.timeout_seconds == 30.0
    assert config.token_refresh_margin_seconds == 60.0


def test_client_config_is_frozen() -> None:
    """生成後の変更は拒否されること。"""
    config = ClientConfig(client_id="id", secret="secret")
    with pytest.raises(ValidationError):
        config.api_base = API_BASE_LIVE


def test_load_config(tmp_path: Path) -> None:
    """YAML から AppConfig を読み込めること。"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "paypal:\n"
        "  client_id: abc\n"
        "  secret: xyz\n"
        f"  api_base: {API_BASE_LIVE}\n"
        "  timeout_seconds: 5\n"
        "log:\n"
        "  level: DEBUG\n"
        "  format: text\n"
    )
    config = load_config(config_file)
    assert config.paypal.client_id == "abc"
    assert config.paypal.api_base == API_BASE_LIVE
    assert config.paypal.timeout_seconds == 5.0
    assert config.log.level == "DEBUG"
    assert config.log.format == "text"


def test_load_config_log_defaults(tmp_path: Path) -> None:
    """log セクション省略時は既定値。"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text("paypal:\n  client_id: abc\n  secret: xyz\n")
    config = load_config(config_file)
    assert config.log.level == "INFO"
    assert config.log.format == "json"


def test_load_config_file_not_found(tmp_path: Path) -> None:
    """存在しないファイルで CONFIG_READ になること。"""
    with pytest.raises(PayPalError) as exc_info:
        load_config(tmp_path / "missing.yaml")
    assert exc_info.value.code == PayPalErrorCodes.CONFIG_READ


def test_load_config_invalid_yaml(tmp_path: Path) -> None:
    """不正 YAML で CONFIG_PARSE になること。"""
    bad_file = tmp_path / "bad.yaml"
    bad_file.write_text("paypal: {invalid: yaml: content:\n")
    with pytest.raises(PayPalError) as exc_info:
        load_config(bad_file)
    assert exc_info.value.code == PayPalErrorCodes.CONFIG_PARSE


def test_load_config_validation_error(tmp_path: Path) -> None:
    """必須項目欠落や範囲外の値で CONFIG_VALIDATION になること。"""
    bad_file = tmp_path / "bad.yaml"
    bad_file.write_text("paypal:\n  client_id: abc\n  secret: xyz\n  timeout_seconds: 0\n")
    with pytest.raises(PayPalError) as exc_info:
        load_config(bad_file)
    assert exc_info.value.code == PayPalErrorCodes.CONFIG_VALIDATION
    assert isinstance(exc_info.value.__cause__, ValidationError)
