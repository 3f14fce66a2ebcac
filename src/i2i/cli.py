"""CLI entry point for i2i."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from i2i import __version__
from i2i.config import DEFAULT_CONFIG_NAME, ConfigError, I2IConfig, get_default_config, load_config
from i2i.converter import REGISTRY, ExportFormat, ImageConverter, available_formats
from i2i.doctor import check_all_codecs
from i2i.logger import ConversionLog, LogConfig, VerboseLevel
from i2i.types import ExitCode

app = typer.Typer(help="画像ファイルを別の画像形式に変換するCLIツール")
console = Console()


def _resolve_config(config_path: Path | None) -> I2IConfig:
    """設定ファイルを読み込む（指定がなくカレントにも無い場合はデフォルト）"""
    if config_path is not None:
        return load_config(config_path)
    default_path = Path.cwd() / DEFAULT_CONFIG_NAME
    if default_path.exists():
        return load_config(default_path)
    return get_default_config()


@app.command()
def convert(
    files: Annotated[list[Path], typer.Argument(help="変換元ファイルパス")],
    export_format: Annotated[
        str | None, typer.Option("-f", "--format", help="出力形式（png, jpg, webp 等）")
    ] = None,
    config_path: Annotated[Path | None, typer.Option("--config", help="設定ファイル")] = None,
    log_file: Annotated[Path | None, typer.Option(help="ログファイル出力先")] = None,
    quiet: Annotated[bool, typer.Option("-q", "--quiet", help="ログをコンソールに表示しない")] = False,
) -> None:
    """画像ファイルを指定形式に変換する"""
    try:
        config = _resolve_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(ExitCode.INVALID_INPUT) from e

    target = config.export.format
    if export_format is not None:
        try:
            target = ExportFormat.parse(export_format)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(ExitCode.INVALID_INPUT) from e

    if target not in available_formats():
        console.print(f"[red]Error: この環境では出力形式 {target} を利用できません[/red]")
        raise typer.Exit(ExitCode.INVALID_INPUT)

    log_config = LogConfig(
        verbose_level=VerboseLevel.QUIET if quiet else VerboseLevel.NORMAL,
        log_file=log_file or config.log.file,
        use_timestamp=config.log.timestamps,
    )
    with ConversionLog(log_config) as log:
        summary = ImageConverter(log).convert_files(files, target)

    message = (
        f"{target}: 成功 {summary.success} / スキップ {summary.skipped} / "
        f"失敗 {summary.failed} (全{summary.total}件)"
    )
    if summary.failed:
        console.print(f"[red]{message}[/red]")
        raise typer.Exit(ExitCode.ERROR)
    console.print(f"[green]{message}[/green]")
    raise typer.Exit(ExitCode.SUCCESS)


@app.command()
def formats() -> None:
    """対応する出力形式を表示する"""
    table = Table(title="出力形式")
    table.add_column("形式", justify="left")
    table.add_column("拡張子", justify="left")
    table.add_column("コーデック", justify="left")
    table.add_column("専用パス", justify="center")
    table.add_column("利用可否", justify="center")

    available = available_formats()
    for spec in REGISTRY.values():
        table.add_row(
            str(spec.export_format),
            f".{spec.extension}",
            spec.codec or "-",
            "[yellow]専用[/yellow]" if spec.specialized else "汎用",
            "[green]✓[/green]" if spec.export_format in available else "[red]✗[/red]",
        )

    console.print(table)
    raise typer.Exit(ExitCode.SUCCESS)


@app.command()
def doctor() -> None:
    """画像コーデックの利用可否をチェックする"""
    results = check_all_codecs()

    table = Table(title="コーデックチェック結果")
    table.add_column("ステータス", justify="center")
    table.add_column("名前", justify="left")
    table.add_column("バージョン", justify="left")
    table.add_column("必須", justify="center")
    table.add_column("メッセージ", justify="left")

    has_missing_required = False

    for result in results:
        if result.found:
            status = "[green]✓[/green]"
        else:
            status = "[red]✗[/red]"
            if result.required:
                has_missing_required = True

        required_str = "[yellow]必須[/yellow]" if result.required else "オプション"
        table.add_row(status, result.name, result.version or "-", required_str, result.message or "")

    console.print(table)

    if has_missing_required:
        console.print("\n[red]エラー: 必須コーデックが不足しています[/red]")
        raise typer.Exit(ExitCode.ERROR)
    console.print("\n[green]すべての必須コーデックが利用可能です[/green]")
    raise typer.Exit(ExitCode.SUCCESS)


def version_callback(value: bool) -> None:
    """バージョン表示コールバック"""
    if value:
        typer.echo(f"i2i {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="バージョンを表示する",
        ),
    ] = False,
) -> None:
    """i2i CLI - 画像形式変換"""
    pass
