"""Converter module for i2i.

画像形式変換機能を提供するモジュール。
出力形式レジストリと、読み込み・書き出しを行う変換パイプラインで構成される。
"""

from i2i.converter.base import (
    ConversionError,
    ConversionResult,
    ConversionStatus,
    ConversionSummary,
    DecodeError,
    EncodeError,
    ErrorKind,
    OverwriteCollisionError,
    UnsupportedFormatError,
)
from i2i.converter.formats import (
    REGISTRY,
    ExportFormat,
    FormatSpec,
    RegistryError,
    available_formats,
    extension_for,
    generic_codec_for,
    is_available,
    requires_specialized_encoder,
)
from i2i.converter.image import (
    DEFAULT_RESOLUTION,
    DecodedImage,
    ImageConverter,
    ImageDecoder,
    ImageEncoder,
)

__all__ = [
    "DEFAULT_RESOLUTION",
    "REGISTRY",
    "ConversionError",
    "ConversionResult",
    "ConversionStatus",
    "ConversionSummary",
    "DecodeError",
    "DecodedImage",
    "EncodeError",
    "ErrorKind",
    "ExportFormat",
    "FormatSpec",
    "ImageConverter",
    "ImageDecoder",
    "ImageEncoder",
    "OverwriteCollisionError",
    "RegistryError",
    "UnsupportedFormatError",
    "available_formats",
    "extension_for",
    "generic_codec_for",
    "is_available",
    "requires_specialized_encoder",
]
