"""変換ログ出力のインターフェース定義

このモジュールは、画像変換パイプラインが結果を報告するためのログ出力先を定義する。
パイプラインはLogSinkプロトコルにのみ依存し、具体的な出力先（コンソール、
ログファイル、テスト用のメモリ上のバッファ等）は呼び出し側が用意する。
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from threading import Lock
from typing import Protocol, TextIO


class VerboseLevel(IntEnum):
    """詳細ログレベル

    QUIET: コンソールに出力しない（ログファイルと履歴には記録する）
    NORMAL: すべての行をコンソールに出力する
    """

    QUIET = -1
    NORMAL = 0


class LogSink(Protocol):
    """ログ出力先のプロトコル

    変換パイプラインから呼ばれ、1行または複数行を順序どおりに追記する。
    UIスレッド以外から呼ばれても安全である必要がある。
    """

    def add_log_line(self, line: str) -> None:
        """1行を追記する

        Args:
            line: 追記する行
        """
        ...

    def add_log_lines(self, lines: Sequence[str]) -> None:
        """複数行を追記する

        Args:
            lines: 追記する行のシーケンス
        """
        ...


@dataclass
class LogConfig:
    """ログ設定

    Attributes:
        verbose_level: コンソール出力の詳細度レベル
        log_file: ログ出力先ファイルパス（Noneの場合はファイル出力なし）
        use_timestamp: 各行の先頭に時刻を付与するか
    """

    verbose_level: VerboseLevel = VerboseLevel.NORMAL
    log_file: Path | None = None
    use_timestamp: bool = True


class ConversionLog:
    """変換ログ出力クラス

    LogSinkプロトコルの標準実装。各行に "HH:MM:SS.ff::" 形式の時刻を付与し、
    コンソール、ログファイル、メモリ上の履歴に記録する。
    1行単位でロックを取るため、複数スレッドから呼ばれても行が混ざらない。

    使用例:
        >>> with ConversionLog(LogConfig()) as log:
        ...     log.add_log_line("Reading: photo.bmp")
    """

    def __init__(self, config: LogConfig | None = None, stream: TextIO | None = None) -> None:
        """ログ出力を初期化する

        Args:
            config: ログ設定（Noneの場合はデフォルト設定）
            stream: コンソール出力先（Noneの場合は標準出力）
        """
        self._config = config or LogConfig()
        self._stream = stream
        self._lock = Lock()
        self._lines: list[str] = []
        self._log_file: TextIO | None = None
        if self._config.log_file:
            # クラス自体がコンテキストマネージャとして動作し、__exit__でファイルを閉じる
            self._log_file = open(self._config.log_file, "a", encoding="utf-8")  # noqa: SIM115

    def __enter__(self) -> ConversionLog:
        """コンテキストマネージャのエントリポイント"""
        return self

    def __exit__(self, *args: object) -> None:
        """コンテキストマネージャの終了処理"""
        self.close()

    @property
    def config(self) -> LogConfig:
        """ログ設定を取得する"""
        return self._config

    @property
    def lines(self) -> tuple[str, ...]:
        """これまでに記録した行（時刻付き）を返す"""
        with self._lock:
            return tuple(self._lines)

    def close(self) -> None:
        """ログファイルを閉じる"""
        with self._lock:
            if self._log_file:
                self._log_file.close()
                self._log_file = None

    def add_log_line(self, line: str) -> None:
        """1行を追記する"""
        self.add_log_lines([line])

    def add_log_lines(self, lines: Iterable[str]) -> None:
        """複数行を追記する

        Args:
            lines: 追記する行
        """
        with self._lock:
            for line in lines:
                stamped = self._stamp(line)
                self._lines.append(stamped)
                if self._config.verbose_level > VerboseLevel.QUIET:
                    print(stamped, file=self._stream or sys.stdout)
                if self._log_file:
                    self._log_file.write(stamped + "\n")
            if self._log_file:
                self._log_file.flush()

    def clear(self) -> None:
        """メモリ上の履歴を消去する"""
        with self._lock:
            self._lines.clear()

    def _stamp(self, line: str) -> str:
        """行の先頭に時刻を付与する

        Args:
            line: 対象の行

        Returns:
            "HH:MM:SS.ff::line" 形式の行（時刻無効時はそのまま）
        """
        if not self._config.use_timestamp:
            return line
        # %fはマイクロ秒のため、末尾4桁を落として1/100秒にする
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-4]
        return f"{timestamp}::{line}"
