"""Configuration module for i2i."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from i2i.converter.formats import ExportFormat

DEFAULT_CONFIG_NAME = "i2i.yml"


class ConfigError(Exception):
    """設定ファイル読み込みエラー"""

    pass


@dataclass(frozen=True)
class ExportConfig:
    """出力設定"""

    format: ExportFormat = ExportFormat.PNG


@dataclass(frozen=True)
class LogSettings:
    """ログ設定"""

    file: Path | None = None
    timestamps: bool = True


@dataclass(frozen=True)
class I2IConfig:
    """ルート設定"""

    export: ExportConfig = field(default_factory=ExportConfig)
    log: LogSettings = field(default_factory=LogSettings)


def load_config(path: Path) -> I2IConfig:
    """設定ファイルを読み込む

    Args:
        path: 設定ファイルパス

    Returns:
        I2IConfig: 読み込んだ設定（デフォルトとマージ済み）

    Raises:
        ConfigError: ファイル読み込みまたはパースエラー
    """
    if not path.exists():
        raise ConfigError(f"設定ファイルが見つかりません: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML解析エラー: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("設定ファイルはYAMLのマッピング形式である必要があります")

    default = get_default_config()

    return I2IConfig(
        export=_merge_export_config(data.get("export", {}), default.export),
        log=_merge_log_settings(data.get("log", {}), default.log),
    )


def get_default_config() -> I2IConfig:
    """デフォルト設定を取得する"""
    return I2IConfig()


def _merge_export_config(data: dict[str, Any], default: ExportConfig) -> ExportConfig:
    """出力設定をマージする"""
    if not isinstance(data, dict) or "format" not in data:
        return default
    try:
        export_format = ExportFormat.parse(str(data["format"]))
    except ValueError as e:
        raise ConfigError(str(e)) from e
    return ExportConfig(format=export_format)


def _merge_log_settings(data: dict[str, Any], default: LogSettings) -> LogSettings:
    """ログ設定をマージする"""
    if not isinstance(data, dict):
        return default
    log_file = data.get("file")
    return LogSettings(
        file=Path(log_file) if log_file else default.file,
        timestamps=bool(data.get("timestamps", default.timestamps)),
    )
