import binascii
import importlib.metadata as im
import logging
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import harness
from .checker import LOGGER, dont_panic
from .config import ConfigError, load_settings

app = typer.Typer(
    add_completion=False,
    help="Fuzzing demonstration target: warns when given the input 'fuzz'.",
)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", help="Show dontpanic version and exit."
    ),
):
    if version:
        try:
            ver = im.version("dontpanic")
        except im.PackageNotFoundError:
            from . import __version__ as ver
        print(ver)
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit(0)


@app.command("check")
def cmd_check(
    value: str = typer.Argument("", help="Input to check (ignored with --stdin)."),
    hex_input: bool = typer.Option(False, "--hex", help="Decode VALUE as hex bytes."),
    stdin: bool = typer.Option(False, "--stdin", help="Read raw bytes from stdin."),
    fail_on_match: bool = typer.Option(
        False, "--fail-on-match", help="Exit 1 when the input triggers the warning."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Run one input through the checker."""
    console = Console()
    _setup_logging(verbose)

    data: str | bytes = value
    if stdin:
        data = sys.stdin.buffer.read()
    elif hex_input:
        try:
            data = binascii.unhexlify(value.strip())
        except (binascii.Error, ValueError) as exc:
            console.print(f"[bold red][ERR][/] invalid hex input: {exc}")
            raise typer.Exit(2)

    hits: list[str] = []

    def sink(message: str) -> None:
        hits.append(message)
        LOGGER.warning(message)

    dont_panic(data, sink)
    if hits:
        console.print("[yellow][WARN][/yellow] input triggered warning")
        if fail_on_match:
            raise typer.Exit(1)
    else:
        console.print("[green][OK][/green] no warning")


@app.command("fuzz")
def cmd_fuzz(
    config: Optional[str] = typer.Option(None, "--config", help="Path to TOML config."),
    runs: Optional[int] = typer.Option(None, "--runs", help="libFuzzer -runs."),
    max_len: Optional[int] = typer.Option(None, "--max-len", help="libFuzzer -max_len."),
    seed: Optional[int] = typer.Option(None, "--seed", help="libFuzzer -seed."),
    corpus: Optional[str] = typer.Option(None, "--corpus", help="Corpus directory."),
    panic_on_match: Optional[bool] = typer.Option(
        None,
        "--panic-on-match/--log-on-match",
        help="Raise on the target input so the fuzzer reports a crash.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Fuzz the checker with atheris."""
    console = Console()
    _setup_logging(verbose)
    try:
        settings = load_settings(
            config,
            overrides={
                "runs": runs,
                "max_len": max_len,
                "seed": seed,
                "corpus_dir": corpus,
                "panic_on_match": panic_on_match,
            },
        )
    except ConfigError as exc:
        console.print(f"[bold red][ERR][/] bad config: {exc}")
        raise typer.Exit(2)

    if settings.source:
        console.print(f"[dim]config: {settings.source}[/dim]")
    try:
        harness.run(settings)
    except harness.HarnessUnavailable as exc:
        console.print(f"[bold red][ERR][/] {exc}")
        raise typer.Exit(2)


def main() -> None:  # console_scripts entrypoint expects this
    app()
