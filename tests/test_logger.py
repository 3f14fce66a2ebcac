"""変換ログ出力のテスト

ConversionLogの動作を検証するテストスイート。
"""

from __future__ import annotations

import io
import re
from pathlib import Path
from threading import Thread
from typing import TYPE_CHECKING

import pytest

from i2i.logger import ConversionLog, LogConfig, LogSink, VerboseLevel

if TYPE_CHECKING:
    from pytest import CaptureFixture

TIMESTAMP_PATTERN = re.compile(r"^\d{2}:\d{2}:\d{2}\.\d{2}::")


class TestLogConfig:
    """LogConfig設定クラスのテスト"""

    def test_default_values(self) -> None:
        """デフォルト値が正しく設定される"""
        config = LogConfig()
        assert config.verbose_level == VerboseLevel.NORMAL
        assert config.log_file is None
        assert config.use_timestamp is True

    def test_level_ordering(self) -> None:
        assert VerboseLevel.QUIET < VerboseLevel.NORMAL


class TestConversionLog:
    """ConversionLogのテスト"""

    def test_satisfies_log_sink(self) -> None:
        sink: LogSink = ConversionLog()
        sink.add_log_line("Reading: a.bmp")

    def test_lines_are_timestamped(self, capsys: CaptureFixture[str]) -> None:
        """各行に HH:MM:SS.ff:: 形式の時刻が付与される"""
        log = ConversionLog()
        log.add_log_line("Reading: a.bmp")

        captured = capsys.readouterr()
        assert TIMESTAMP_PATTERN.match(log.lines[0])
        assert log.lines[0].endswith("::Reading: a.bmp")
        assert captured.out == log.lines[0] + "\n"

    def test_without_timestamp(self) -> None:
        log = ConversionLog(LogConfig(use_timestamp=False), stream=io.StringIO())
        log.add_log_lines(["Reading: a.bmp", "Writing: a.png"])
        assert log.lines == ("Reading: a.bmp", "Writing: a.png")

    def test_quiet_suppresses_console(self, capsys: CaptureFixture[str]) -> None:
        """QUIETではコンソールに出力しないが履歴には残る"""
        log = ConversionLog(LogConfig(verbose_level=VerboseLevel.QUIET))
        log.add_log_line("Read failed: broken")

        assert capsys.readouterr().out == ""
        assert len(log.lines) == 1

    def test_stream(self) -> None:
        stream = io.StringIO()
        log = ConversionLog(LogConfig(use_timestamp=False), stream=stream)
        log.add_log_line("Writing: a.png")
        assert stream.getvalue() == "Writing: a.png\n"

    def test_log_file(self, tmp_path: Path) -> None:
        """ログファイルに追記され、closeで閉じられる"""
        log_file = tmp_path / "i2i.log"
        config = LogConfig(
            verbose_level=VerboseLevel.QUIET, log_file=log_file, use_timestamp=False
        )
        with ConversionLog(config) as log:
            log.add_log_lines(["Reading: a.bmp", "Writing: a.png"])
        with ConversionLog(config) as log:
            log.add_log_line("Reading: b.bmp")

        assert log_file.read_text(encoding="utf-8").splitlines() == [
            "Reading: a.bmp",
            "Writing: a.png",
            "Reading: b.bmp",
        ]

    def test_close_is_idempotent(self, tmp_path: Path) -> None:
        log = ConversionLog(LogConfig(log_file=tmp_path / "i2i.log"), stream=io.StringIO())
        log.close()
        log.close()

    def test_clear(self) -> None:
        log = ConversionLog(LogConfig(verbose_level=VerboseLevel.QUIET))
        log.add_log_line("Reading: a.bmp")
        log.clear()
        assert log.lines == ()

    @pytest.mark.parametrize("thread_count", [pytest.param(8, id="8スレッド")])
    def test_concurrent_lines_are_not_interleaved(self, thread_count: int) -> None:
        """複数スレッドから追記しても行が欠けたり混ざったりしない"""
        stream = io.StringIO()
        log = ConversionLog(LogConfig(use_timestamp=False), stream=stream)

        def worker(index: int) -> None:
            for n in range(50):
                log.add_log_line(f"worker-{index}-{n}")

        threads = [Thread(target=worker, args=(i,)) for i in range(thread_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        printed = stream.getvalue().splitlines()
        assert len(log.lines) == thread_count * 50
        assert sorted(printed) == sorted(log.lines)
        assert all(re.fullmatch(r"worker-\d+-\d+", line) for line in printed)
