"""テスト共通フィクスチャ"""

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from i2i.logger import ConversionLog, LogConfig, VerboseLevel

ImageFactory = Callable[..., Path]


@pytest.fixture
def recording_log() -> ConversionLog:
    """コンソールに出力せず、時刻なしで行を記録するログ"""
    return ConversionLog(LogConfig(verbose_level=VerboseLevel.QUIET, use_timestamp=False))


@pytest.fixture
def make_image(tmp_path: Path) -> ImageFactory:
    """グラデーション画像をtmp_pathに書き出すファクトリ"""

    def _make(
        name: str,
        *,
        size: tuple[int, int] = (16, 12),
        mode: str = "RGB",
        image_format: str | None = None,
        **save_params: object,
    ) -> Path:
        width, height = size
        image = Image.new(mode, size)
        for y in range(height):
            for x in range(width):
                r = x * 255 // max(width - 1, 1)
                g = y * 255 // max(height - 1, 1)
                b = (x + y) * 7 % 256
                if mode == "RGBA":
                    image.putpixel((x, y), (r, g, b, 255 if x % 2 else 128))
                elif mode == "L":
                    image.putpixel((x, y), r)
                else:
                    image.putpixel((x, y), (r, g, b))
        path = tmp_path / name
        image.save(path, image_format, **save_params)
        image.close()
        return path

    return _make
