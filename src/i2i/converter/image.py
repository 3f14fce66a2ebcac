"""画像変換モジュール

任意の画像ファイルを指定された出力形式に変換する。
読み込みはPillowの汎用デコーダー、またはWebP等の専用デコーダーで行い、
書き出しは出力形式レジストリに従って汎用パスまたは専用パスで行う。
変換結果はすべてLogSinkへの行として報告され、例外は呼び出し元に伝播しない。
"""

from collections.abc import Iterable
from pathlib import Path

from PIL import Image

from i2i.converter.base import (
    ConversionError,
    ConversionResult,
    ConversionStatus,
    ConversionSummary,
    DecodeError,
    EncodeError,
    OverwriteCollisionError,
    UnsupportedFormatError,
)
from i2i.converter.formats import (
    ExportFormat,
    extension_for,
    generic_codec_for,
    is_available,
    requires_specialized_encoder,
    specialized_decoder_for,
)
from i2i.logger import LogSink

# 解像度情報を持たない画像に設定する既定値（DPI）
DEFAULT_RESOLUTION: tuple[float, float] = (96.0, 96.0)

# WebP書き出し時の品質値（ロスレス時は圧縮努力量として扱われる）
WEBP_QUALITY = 100

# コーデックごとに書き出し可能なピクセルモード
# ここにないコーデックはPillowのプラグイン側で変換される
_WRITABLE_MODES: dict[str, tuple[str, ...]] = {
    "JPEG": ("1", "L", "RGB", "CMYK"),
    "BMP": ("1", "L", "P", "RGB", "RGBA"),
    "PNG": ("1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"),
    "GIF": ("1", "L", "P", "RGB", "RGBA"),
    "ICO": ("1", "L", "LA", "P", "RGB", "RGBA"),
}

# アルファチャンネルを保持できないコーデック
_OPAQUE_CODECS = frozenset({"JPEG"})


class DecodedImage:
    """デコード済み画像

    ピクセルデータと水平・垂直解像度（DPI）を保持する。
    変換処理1回につき1つ生成され、その処理が排他的に所有する。
    コンテキストマネージャとして使用し、抜ける際に必ずメモリを解放する。

    Attributes:
        resolution: (水平DPI, 垂直DPI)
    """

    def __init__(
        self,
        image: Image.Image,
        resolution: tuple[float, float] = DEFAULT_RESOLUTION,
    ) -> None:
        self._image = image
        self.resolution = resolution
        self._closed = False

    def __enter__(self) -> "DecodedImage":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def image(self) -> Image.Image:
        """PIL.Imageオブジェクトを返す"""
        if self._closed:
            raise ValueError("解放済みの画像です")
        return self._image

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def closed(self) -> bool:
        """解放済みかどうかを返す"""
        return self._closed

    def close(self) -> None:
        """画像のメモリを解放する"""
        if not self._closed:
            self._image.close()
            self._closed = True


class ImageDecoder:
    """画像デコーダー

    拡張子が専用デコーダーの対象（.webp）であればそのフォーマットに限定して読み込み、
    それ以外はPillowの汎用デコーダーでファイル内容から形式を判別して読み込む。
    """

    def decode(self, source: Path) -> DecodedImage:
        """画像ファイルを読み込む

        ピクセルデータはこの時点で読み込むため、途中で切れたファイルや
        壊れたファイルはここで失敗する。

        Args:
            source: 変換元ファイルのパス

        Returns:
            デコード済み画像

        Raises:
            DecodeError: 読み込みに失敗した場合
        """
        decoder = specialized_decoder_for(source)
        try:
            if decoder is not None:
                image = Image.open(source, formats=[decoder])
            else:
                image = Image.open(source)
        except Exception as e:
            raise DecodeError(_describe(e)) from e

        try:
            image.load()
        except Exception as e:
            image.close()
            raise DecodeError(_describe(e)) from e

        # 専用デコーダーの出力は解像度情報を引き継がない
        resolution = DEFAULT_RESOLUTION if decoder is not None else _read_resolution(image)
        return DecodedImage(image, resolution)


class ImageEncoder:
    """画像エンコーダー

    専用エンコーダーが必要な形式（WebP）はロスレス・品質100で書き出す。
    この経路では解像度情報は書き出されない。
    それ以外の形式は元画像の解像度を明示的に指定して汎用コーデックで書き出す。
    """

    def encode(self, decoded: DecodedImage, dest: Path, export_format: ExportFormat) -> None:
        """デコード済み画像をファイルに書き出す

        Args:
            decoded: デコード済み画像
            dest: 変換先ファイルのパス
            export_format: 出力形式

        Raises:
            EncodeError: 書き込みに失敗した場合
        """
        try:
            if requires_specialized_encoder(export_format):
                self._encode_webp(decoded, dest)
            else:
                self._encode_generic(decoded, dest, generic_codec_for(export_format))
        except Exception as e:
            raise EncodeError(_describe(e)) from e

    def _encode_webp(self, decoded: DecodedImage, dest: Path) -> None:
        """WebP形式で書き出す内部メソッド"""
        decoded.image.save(dest, "WEBP", lossless=True, quality=WEBP_QUALITY)

    def _encode_generic(self, decoded: DecodedImage, dest: Path, codec: str) -> None:
        """汎用コーデックで書き出す内部メソッド

        Args:
            decoded: デコード済み画像
            dest: 保存先パス
            codec: Pillowのコーデック識別子
        """
        source_image = decoded.image
        image = _convert_for_codec(source_image, codec)
        try:
            image.save(dest, codec, dpi=decoded.resolution)
        finally:
            if image is not source_image:
                image.close()


class ImageConverter:
    """画像変換クラス

    1ファイルずつ読み込み・書き出しを行い、結果をLogSinkに報告する。
    失敗はファイル単位で完結し、次のファイルの変換に影響しない。

    使用例:
        >>> converter = ImageConverter(ConversionLog())
        >>> converter.convert_file("photo.bmp", ExportFormat.PNG)
    """

    def __init__(
        self,
        logger: LogSink,
        decoder: ImageDecoder | None = None,
        encoder: ImageEncoder | None = None,
    ) -> None:
        """ImageConverterを初期化する

        Args:
            logger: ログ出力先
            decoder: 画像デコーダー（Noneの場合は標準のデコーダー）
            encoder: 画像エンコーダー（Noneの場合は標準のエンコーダー）
        """
        self._logger = logger
        self._decoder = decoder or ImageDecoder()
        self._encoder = encoder or ImageEncoder()

    @staticmethod
    def destination_for(source: Path, export_format: ExportFormat) -> Path:
        """変換先パスを返す

        変換元と同じディレクトリ・ファイル名で、拡張子のみを出力形式のものに置き換える。
        拡張子はファイル名の最後のドット以降とする（".png"は拡張子のみ、"foo."は空の拡張子）。

        Args:
            source: 変換元ファイルのパス
            export_format: 出力形式

        Returns:
            変換先ファイルのパス
        """
        name = source.name
        dot = name.rfind(".")
        stem = name[:dot] if dot >= 0 else name
        return source.with_name(f"{stem}.{extension_for(export_format)}")

    def convert_file(self, source: str | Path, export_format: ExportFormat) -> ConversionResult:
        """画像ファイルを指定された形式に変換する

        結果はすべてLogSinkへ出力される。戻り値は集計用であり、
        呼び出し側が無視しても構わない。例外は送出しない。

        Args:
            source: 変換元ファイルのパス
            export_format: 出力形式

        Returns:
            変換結果
        """
        source = Path(source)
        self._logger.add_log_lines([f"Reading: {source}"])

        dest: Path | None = None
        try:
            dest = self._prepare_destination(source, export_format)
            decoded = self._decoder.decode(source)
        except ConversionError as e:
            self._logger.add_log_line(_failure_line(e))
            return ConversionResult.from_error(source, dest, e)

        self._logger.add_log_lines([f"Writing: {dest}"])
        try:
            with decoded:
                self._encoder.encode(decoded, dest, export_format)
        except ConversionError as e:
            self._logger.add_log_line(_failure_line(e))
            return ConversionResult.from_error(source, dest, e)

        return ConversionResult(
            source_path=source,
            dest_path=dest,
            status=ConversionStatus.SUCCESS,
            bytes_before=_get_file_size(source),
            bytes_after=_get_file_size(dest),
        )

    def convert_files(
        self, sources: Iterable[str | Path], export_format: ExportFormat
    ) -> ConversionSummary:
        """複数ファイルを順番に変換する

        Args:
            sources: 変換元ファイルパスの一覧
            export_format: 出力形式

        Returns:
            変換結果のサマリー
        """
        paths = list(sources)
        summary = ConversionSummary(total=len(paths))
        for path in paths:
            summary.add(self.convert_file(path, export_format))
        return summary

    def _prepare_destination(self, source: Path, export_format: ExportFormat) -> Path:
        """変換先パスを決定し、上書きと出力形式の可否を検証する

        上書き判定はファイルシステムを参照せず、パス文字列の大文字小文字を
        無視した比較のみで行う。

        Raises:
            DecodeError: 変換元パスにファイル名がない場合
            OverwriteCollisionError: 変換先が変換元と同じパスになる場合
            UnsupportedFormatError: 実行環境で出力形式が利用できない場合
        """
        if not source.name:
            raise DecodeError(f"ファイル名がありません: {source}")
        dest = self.destination_for(source, export_format)
        if str(dest).casefold() == str(source).casefold():
            raise OverwriteCollisionError(str(dest))
        if not is_available(export_format):
            raise UnsupportedFormatError(str(export_format))
        return dest


def _failure_line(error: ConversionError) -> str:
    """エラーをログ行に変換する"""
    if isinstance(error, OverwriteCollisionError):
        return "Cannot overwrite existing file."
    if isinstance(error, UnsupportedFormatError):
        return f"Unsupported export format: {error}"
    if isinstance(error, EncodeError):
        return f"Write failed: {error}"
    return f"Read failed: {error}"


def _describe(error: Exception) -> str:
    """例外を "型名: メッセージ" 形式の文字列にする"""
    return f"{type(error).__name__}: {error}"


def _read_resolution(image: Image.Image) -> tuple[float, float]:
    """画像情報から解像度を取得する

    Args:
        image: 読み込み済みの画像

    Returns:
        (水平DPI, 垂直DPI)。情報がない、または不正な場合は既定値
    """
    dpi = image.info.get("dpi")
    try:
        x_dpi, y_dpi = (float(value) for value in dpi)
    except (TypeError, ValueError):
        return DEFAULT_RESOLUTION
    if x_dpi <= 0 or y_dpi <= 0:
        return DEFAULT_RESOLUTION
    return (x_dpi, y_dpi)


def _convert_for_codec(image: Image.Image, codec: str) -> Image.Image:
    """コーデックが書き出せないピクセルモードの場合のみ変換する

    Args:
        image: 変換対象の画像
        codec: Pillowのコーデック識別子

    Returns:
        書き出し可能なモードの画像（変換不要の場合は引数そのもの）
    """
    writable = _WRITABLE_MODES.get(codec)
    if writable is None or image.mode in writable:
        return image
    if len(image.getbands()) == 1:
        # 単一チャンネル（I, I;16, F等）はグレースケールとして書き出す
        return image.convert("L")
    has_alpha = "A" in image.mode or "transparency" in image.info
    if has_alpha and codec not in _OPAQUE_CODECS:
        return image.convert("RGBA")
    return image.convert("RGB")


def _get_file_size(path: Path) -> int:
    """ファイルサイズを取得する（存在しない場合は0）"""
    if path.exists():
        return path.stat().st_size
    return 0
