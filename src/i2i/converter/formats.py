"""出力形式レジストリモジュール

出力形式（ExportFormat）と、書き出し時の拡張子・Pillowのコーデック識別子との
対応表を定義する。対応表はモジュール読み込み時に一度だけ構築され、
以降は読み取り専用として扱われる。
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType

from PIL import Image, features


class RegistryError(Exception):
    """出力形式レジストリの構成エラー"""

    pass


class ExportFormat(Enum):
    """出力形式

    変換先として選択可能な画像形式の列挙型。
    値は表示名として使用され、小文字化したものが出力拡張子になる（Jpegのみ例外）。
    """

    BMP = "Bmp"
    EMF = "Emf"
    EXIF = "Exif"
    GIF = "Gif"
    ICON = "Icon"
    JPEG = "Jpeg"
    PNG = "Png"
    TIFF = "Tiff"
    WMF = "Wmf"
    WEBP = "Webp"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "ExportFormat":
        """表示名または拡張子から出力形式を取得する

        大文字小文字は区別しない。先頭のドットは無視する。

        Args:
            text: 表示名（例: "Jpeg"）または拡張子（例: "jpg", ".png"）

        Returns:
            対応する出力形式

        Raises:
            ValueError: 該当する出力形式が存在しない場合
        """
        key = text.strip().lstrip(".").casefold()
        for export_format in cls:
            if key in (export_format.value.casefold(), extension_for(export_format)):
                return export_format
        raise ValueError(f"未対応の出力形式です: {text}")


@dataclass(frozen=True)
class FormatSpec:
    """出力形式ごとのレジストリエントリ

    Attributes:
        export_format: 出力形式
        extension: 出力ファイルの拡張子（小文字、ドットなし）
        codec: 汎用パスで使用するPillowのコーデック識別子（専用パスの場合はNone）
        specialized: 専用エンコーダーを必要とするか
        available: 実行環境で書き出し可能か
    """

    export_format: ExportFormat
    extension: str
    codec: str | None
    specialized: bool
    available: bool = True


# 拡張子の特例
_EXTENSION_OVERRIDES: dict[ExportFormat, str] = {
    ExportFormat.JPEG: "jpg",
}

# 汎用パスのコーデック識別子（Image.SAVEのキー）
# EMF/WMFはPillowに保存ハンドラーがないため、PNGエンコーダーで書き出す
_GENERIC_CODECS: dict[ExportFormat, str] = {
    ExportFormat.BMP: "BMP",
    ExportFormat.EMF: "PNG",
    ExportFormat.EXIF: "JPEG",
    ExportFormat.GIF: "GIF",
    ExportFormat.ICON: "ICO",
    ExportFormat.JPEG: "JPEG",
    ExportFormat.PNG: "PNG",
    ExportFormat.TIFF: "TIFF",
    ExportFormat.WMF: "PNG",
}

# 専用パスで扱う形式と、その可否を判定するPillowの機能名
_SPECIALIZED_FEATURES: dict[ExportFormat, str] = {
    ExportFormat.WEBP: "webp",
}

# 専用デコーダーで読み込む拡張子とPillowのフォーマット名
_SPECIALIZED_DECODERS: dict[str, str] = {
    ".webp": "WEBP",
}


def _build_registry() -> Mapping[ExportFormat, FormatSpec]:
    """出力形式レジストリを構築する

    Returns:
        出力形式をキーとする読み取り専用マッピング

    Raises:
        RegistryError: 汎用パスのコーデックがPillowに登録されていない場合
    """
    Image.init()
    entries: dict[ExportFormat, FormatSpec] = {}
    for export_format in ExportFormat:
        extension = _EXTENSION_OVERRIDES.get(export_format, export_format.value.lower())
        feature = _SPECIALIZED_FEATURES.get(export_format)
        if feature is not None:
            entries[export_format] = FormatSpec(
                export_format=export_format,
                extension=extension,
                codec=None,
                specialized=True,
                available=bool(features.check(feature)),
            )
            continue

        codec = _GENERIC_CODECS.get(export_format)
        if codec is None or codec not in Image.SAVE:
            raise RegistryError(f"コーデックが登録されていません: {export_format} ({codec})")
        entries[export_format] = FormatSpec(
            export_format=export_format,
            extension=extension,
            codec=codec,
            specialized=False,
        )
    return MappingProxyType(entries)


REGISTRY: Mapping[ExportFormat, FormatSpec] = _build_registry()


def extension_for(export_format: ExportFormat) -> str:
    """出力ファイルの拡張子を返す（小文字、ドットなし）"""
    return REGISTRY[export_format].extension


def requires_specialized_encoder(export_format: ExportFormat) -> bool:
    """汎用コーデックでは書き出せない形式かどうかを返す"""
    return REGISTRY[export_format].specialized


def generic_codec_for(export_format: ExportFormat) -> str:
    """汎用パスで使用するPillowのコーデック識別子を返す

    Args:
        export_format: 出力形式

    Returns:
        Image.saveに渡すフォーマット名

    Raises:
        ValueError: 専用エンコーダーを必要とする形式の場合
    """
    codec = REGISTRY[export_format].codec
    if codec is None:
        raise ValueError(f"{export_format}は専用エンコーダーで書き出す形式です")
    return codec


def is_available(export_format: ExportFormat) -> bool:
    """実行環境で書き出し可能な形式かどうかを返す"""
    return REGISTRY[export_format].available


def available_formats() -> tuple[ExportFormat, ...]:
    """書き出し可能な出力形式を列挙順で返す"""
    return tuple(spec.export_format for spec in REGISTRY.values() if spec.available)


def specialized_decoder_for(source: Path) -> str | None:
    """専用デコーダーで読み込むべきファイルならPillowのフォーマット名を返す

    Args:
        source: 変換元ファイルのパス

    Returns:
        フォーマット名（例: "WEBP"）。汎用デコーダーで読み込む場合はNone
    """
    return _SPECIALIZED_DECODERS.get(source.suffix.lower())
