"""変換結果およびエラー定義モジュール

画像変換パイプラインが返す結果型と、ファイル単位のエラー分類を定義する。
いずれのエラーもファイル1件の変換を中断するだけで、呼び出し元には伝播しない。
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ConversionStatus(Enum):
    """変換ステータス

    ファイル変換処理の結果ステータスを表す列挙型。
    成功、スキップ（上書き防止）、失敗の3状態を持つ。
    """

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


class ErrorKind(Enum):
    """変換失敗の分類"""

    OVERWRITE = "overwrite"
    UNSUPPORTED = "unsupported"
    DECODE = "decode"
    ENCODE = "encode"


class ConversionError(Exception):
    """変換処理エラーの基底クラス"""

    kind: ErrorKind


class OverwriteCollisionError(ConversionError):
    """変換先パスが変換元パスと一致する"""

    kind = ErrorKind.OVERWRITE


class UnsupportedFormatError(ConversionError):
    """実行環境で出力形式が利用できない"""

    kind = ErrorKind.UNSUPPORTED


class DecodeError(ConversionError):
    """変換元ファイルの読み込みに失敗した"""

    kind = ErrorKind.DECODE


class EncodeError(ConversionError):
    """変換先ファイルの書き込みに失敗した"""

    kind = ErrorKind.ENCODE


@dataclass(frozen=True)
class ConversionResult:
    """変換結果を表すデータクラス

    単一ファイルの変換処理結果を保持する不変データクラス。

    Attributes:
        source_path: 変換元ファイルのパス
        dest_path: 変換先ファイルのパス（上書き防止でスキップした場合はNone）
        status: 変換ステータス
        error_kind: 失敗・スキップ時のエラー分類
        message: 追加メッセージ（エラー詳細等）
        bytes_before: 変換前のファイルサイズ（バイト）
        bytes_after: 変換後のファイルサイズ（バイト）
    """

    source_path: Path
    dest_path: Path | None
    status: ConversionStatus
    error_kind: ErrorKind | None = None
    message: str = ""
    bytes_before: int = 0
    bytes_after: int = 0

    @property
    def is_success(self) -> bool:
        """変換が成功したかどうかを返す"""
        return self.status == ConversionStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        """変換が失敗したかどうかを返す"""
        return self.status == ConversionStatus.FAILED

    @classmethod
    def from_error(
        cls, source: Path, dest: Path | None, error: ConversionError
    ) -> "ConversionResult":
        """ConversionErrorから結果オブジェクトを生成する

        上書き防止はスキップ、それ以外は失敗として扱う。

        Args:
            source: 変換元ファイルのパス
            dest: 変換先ファイルのパス
            error: 発生したエラー

        Returns:
            エラー内容を反映したConversionResult
        """
        status = (
            ConversionStatus.SKIPPED
            if isinstance(error, OverwriteCollisionError)
            else ConversionStatus.FAILED
        )
        return cls(
            source_path=source,
            dest_path=None if status == ConversionStatus.SKIPPED else dest,
            status=status,
            error_kind=error.kind,
            message=str(error),
        )


@dataclass
class ConversionSummary:
    """変換サマリー

    複数ファイルの変換結果のサマリーを保持するデータクラス。
    mutableとして定義し、結果を蓄積できるようにする。

    Attributes:
        total: 変換対象の総ファイル数
        success: 変換成功数
        failed: 変換失敗数
        skipped: スキップ数
        results: 個々の変換結果のリスト
    """

    total: int = 0
    success: int = 0
    failed: int = 0
    skipped: int = 0
    results: list[ConversionResult] = field(default_factory=list)

    def add(self, result: ConversionResult) -> None:
        """変換結果を集計に加える"""
        self.results.append(result)
        if result.status == ConversionStatus.SUCCESS:
            self.success += 1
        elif result.status == ConversionStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1
