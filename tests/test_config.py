"""設定モデルと YAML 読み込みのユニットテスト"""

from pathlib import Path

import pytest
from k1s0_flag_provider import (
    ConfigError,
    ImpressionsSection,
    ProviderConfig,
    ProviderErrorCodes,
    load_config,
)
from pydantic import ValidationError


def test_provider_config_defaults() -> None:
    """ProviderConfig のデフォルト値確認。"""
    config = ProviderConfig()
    assert config.name == "k1s0"
    assert config.log.level == "INFO"
    assert config.log.format == "json"
    assert config.impressions is None


def test_impressions_section_validation() -> None:
    """不正なタイムアウト・バッファサイズで ValidationError が発生すること。"""
    with pytest.raises(ValidationError):
        ImpressionsSection(url="http://x", timeout_seconds=0)
    with pytest.raises(ValidationError):
        ImpressionsSection(url="http://x", max_buffer_size=0)


def test_log_format_validation() -> None:
    """json / text 以外のログ形式は ValidationError。"""
    with pytest.raises(ValidationError):
        ProviderConfig.model_validate({"log": {"format": "xml"}})


def test_load_config(tmp_path: Path) -> None:
    """YAML から設定を読み込めること。"""
    path = tmp_path / "provider.yaml"
    path.write_text(
        "name: split\n"
        "log:\n"
        "  level: DEBUG\n"
        "  format: text\n"
        "impressions:\n"
        "  url: http://impressions:8080/bulk\n"
        "  api_token: secret\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.name == "split"
    assert config.log.level == "DEBUG"
    assert config.impressions is not None
    assert config.impressions.api_token == "secret"
    assert config.impressions.max_buffer_size == 30000


def test_load_empty_file(tmp_path: Path) -> None:
    """空ファイルはデフォルト設定になること。"""
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == ProviderConfig()


def test_load_missing_file(tmp_path: Path) -> None:
    """存在しないファイルは READ_FILE_ERROR。"""
    with pytest.raises(ConfigError) as exc_info:
        load_config(tmp_path / "missing.yaml")
    assert exc_info.value.code == ProviderErrorCodes.READ_FILE


def test_load_invalid_yaml(tmp_path: Path) -> None:
    """不正な YAML は PARSE_YAML_ERROR。"""
    path = tmp_path / "bad.yaml"
    path.write_text("name: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as exc_info:
        load_config(path)
    assert exc_info.value.code == ProviderErrorCodes.PARSE_YAML


def test_load_invalid_values(tmp_path: Path) -> None:
    """検証エラーは VALIDATION_ERROR。"""
    path = tmp_path / "invalid.yaml"
    path.write_text("impressions:\n  api_token: secret\n", encoding="utf-8")
    with pytest.raises(ConfigError) as exc_info:
        load_config(path)
    assert exc_info.value.code == ProviderErrorCodes.VALIDATION
