"""出力形式レジストリのテスト"""

from pathlib import Path

import pytest
from PIL import Image, features

from i2i.converter.formats import (
    REGISTRY,
    ExportFormat,
    available_formats,
    extension_for,
    generic_codec_for,
    is_available,
    requires_specialized_encoder,
    specialized_decoder_for,
)


class TestExportFormat:
    """ExportFormat列挙型のテスト"""

    def test_str_is_display_name(self) -> None:
        """正常系: 文字列表現は表示名"""
        assert str(ExportFormat.JPEG) == "Jpeg"
        assert str(ExportFormat.PNG) == "Png"

    @pytest.mark.parametrize(
        "text,expected",
        [
            pytest.param("png", ExportFormat.PNG, id="正常系: 小文字の拡張子"),
            pytest.param("Jpeg", ExportFormat.JPEG, id="正常系: 表示名"),
            pytest.param("JPG", ExportFormat.JPEG, id="正常系: 大文字の拡張子"),
            pytest.param(".gif", ExportFormat.GIF, id="正常系: ドット付きの拡張子"),
            pytest.param("icon", ExportFormat.ICON, id="正常系: Icon"),
            pytest.param(" webp ", ExportFormat.WEBP, id="正常系: 前後の空白"),
        ],
    )
    def test_parse(self, text: str, expected: ExportFormat) -> None:
        assert ExportFormat.parse(text) is expected

    @pytest.mark.parametrize(
        "text",
        [
            pytest.param("tif", id="異常系: 正規の拡張子以外"),
            pytest.param("ico", id="異常系: Iconの別名"),
            pytest.param("", id="異常系: 空文字"),
        ],
    )
    def test_parse_unknown(self, text: str) -> None:
        with pytest.raises(ValueError, match="未対応の出力形式"):
            ExportFormat.parse(text)


class TestExtensionFor:
    """extension_forのテスト"""

    @pytest.mark.parametrize("export_format", list(ExportFormat), ids=str)
    def test_all_formats_have_lowercase_extension(self, export_format: ExportFormat) -> None:
        """正常系: 全形式で空でない小文字の拡張子を返す"""
        extension = extension_for(export_format)
        assert extension
        assert extension == extension.lower()
        assert not extension.startswith(".")

    @pytest.mark.parametrize(
        "export_format,expected",
        [
            pytest.param(ExportFormat.JPEG, "jpg", id="正常系: Jpegはjpg"),
            pytest.param(ExportFormat.PNG, "png", id="正常系: Png"),
            pytest.param(ExportFormat.TIFF, "tiff", id="正常系: Tiff"),
            pytest.param(ExportFormat.ICON, "icon", id="正常系: Icon"),
            pytest.param(ExportFormat.WEBP, "webp", id="正常系: Webp"),
        ],
    )
    def test_extension(self, export_format: ExportFormat, expected: str) -> None:
        assert extension_for(export_format) == expected


class TestCodecs:
    """コーデック対応表のテスト"""

    def test_only_webp_requires_specialized_encoder(self) -> None:
        specialized = [f for f in ExportFormat if requires_specialized_encoder(f)]
        assert specialized == [ExportFormat.WEBP]

    @pytest.mark.parametrize(
        "export_format",
        [f for f in ExportFormat if f is not ExportFormat.WEBP],
        ids=str,
    )
    def test_generic_codec_is_registered(self, export_format: ExportFormat) -> None:
        """正常系: 汎用パスのコーデックはPillowに登録されている"""
        Image.init()
        assert generic_codec_for(export_format) in Image.SAVE

    @pytest.mark.parametrize(
        "export_format,expected",
        [
            pytest.param(ExportFormat.EXIF, "JPEG", id="正常系: ExifはJPEGで書き出す"),
            pytest.param(ExportFormat.EMF, "PNG", id="正常系: EmfはPNGで書き出す"),
            pytest.param(ExportFormat.WMF, "PNG", id="正常系: WmfはPNGで書き出す"),
            pytest.param(ExportFormat.ICON, "ICO", id="正常系: IconはICO"),
        ],
    )
    def test_generic_codec(self, export_format: ExportFormat, expected: str) -> None:
        assert generic_codec_for(export_format) == expected

    def test_generic_codec_for_webp_raises(self) -> None:
        """異常系: 専用パスの形式には汎用コーデックがない"""
        with pytest.raises(ValueError):
            generic_codec_for(ExportFormat.WEBP)


class TestRegistry:
    """REGISTRYのテスト"""

    def test_every_format_has_entry(self) -> None:
        assert set(REGISTRY) == set(ExportFormat)

    def test_registry_is_read_only(self) -> None:
        """異常系: レジストリは変更できない"""
        with pytest.raises(TypeError):
            REGISTRY[ExportFormat.PNG] = REGISTRY[ExportFormat.BMP]  # type: ignore[index]

    def test_webp_availability_follows_pillow(self) -> None:
        assert is_available(ExportFormat.WEBP) == bool(features.check("webp"))

    def test_available_formats(self) -> None:
        formats = available_formats()
        assert formats[0] is ExportFormat.BMP
        assert ExportFormat.PNG in formats
        assert (ExportFormat.WEBP in formats) == is_available(ExportFormat.WEBP)


class TestSpecializedDecoderFor:
    """specialized_decoder_forのテスト"""

    @pytest.mark.parametrize(
        "name,expected",
        [
            pytest.param("a.webp", "WEBP", id="正常系: webp"),
            pytest.param("a.WEBP", "WEBP", id="正常系: 大文字のwebp"),
            pytest.param("a.png", None, id="正常系: 汎用デコーダー"),
            pytest.param("webp", None, id="正常系: 拡張子なし"),
        ],
    )
    def test_specialized_decoder_for(
        self, name: str, expected: str | None, tmp_path: Path
    ) -> None:
        assert specialized_decoder_for(tmp_path / name) == expected
