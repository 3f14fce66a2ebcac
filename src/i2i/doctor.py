"""画像コーデックチェッカー"""

from __future__ import annotations

from dataclasses import dataclass

import PIL
from PIL import features


@dataclass(frozen=True)
class CheckResult:
    """チェック結果"""

    name: str
    required: bool
    found: bool
    version: str | None
    message: str | None


@dataclass(frozen=True)
class CodecInfo:
    """コーデック情報"""

    name: str
    feature: str
    required: bool
    formats: tuple[str, ...] = ()


CODECS: list[CodecInfo] = [
    CodecInfo(name="libjpeg", feature="jpg", required=True, formats=("Jpeg", "Exif")),
    CodecInfo(name="zlib", feature="zlib", required=True, formats=("Png",)),
    CodecInfo(name="libtiff", feature="libtiff", required=False, formats=("Tiff",)),
    CodecInfo(name="libwebp", feature="webp", required=False, formats=("Webp",)),
]


def check_pillow() -> CheckResult:
    """Pillow本体のバージョンを返す"""
    return CheckResult(
        name="Pillow",
        required=True,
        found=True,
        version=PIL.__version__,
        message=None,
    )


def check_codec(info: CodecInfo) -> CheckResult:
    """単一のコーデックをチェックする"""
    formats = ", ".join(info.formats)
    if not features.check(info.feature):
        return CheckResult(
            name=info.name,
            required=info.required,
            found=False,
            version=None,
            message=f"{formats} の変換は利用できません",
        )

    return CheckResult(
        name=info.name,
        required=info.required,
        found=True,
        version=features.version(info.feature),
        message=formats or None,
    )


def check_all_codecs() -> list[CheckResult]:
    """Pillowと全てのコーデックをチェックする"""
    return [check_pillow(), *(check_codec(info) for info in CODECS)]
