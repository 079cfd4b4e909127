"""Rat25F syntax checker CLI."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import click

from rat25f import __version__
from rat25f.config import CheckerConfig, resolve_config
from rat25f.errors import DiagnosticRenderer, ParseError
from rat25f.grammar import StartSymbol
from rat25f.lexer import Lexer
from rat25f.parser import Parser
from rat25f.source import SOURCE_ENCODING
from rat25f.trace import ConsoleSink, ProductionSink

SUCCESS_LINE = "Parsing finished successfully."

_START_CHOICES = {s.name.lower(): s for s in StartSymbol}


def _parse_source(
    source: str,
    config: CheckerConfig,
    sink: ProductionSink,
    start: StartSymbol = StartSymbol.PROGRAM,
) -> ParseError | None:
    """Run one parse session. Returns the syntax error, or None on success."""
    parser = Parser(Lexer(source), config.trace, config.policy, sink)
    try:
        parser.parse(start)
    except ParseError as e:
        return e
    return None


def _default_jobs(root: Path) -> list[tuple[Path, Path]]:
    tests_dir = root / "tests"
    jobs = []
    for src in sorted(tests_dir.glob("test*.rat25f")):
        out_name = "output" + src.stem.removeprefix("test") + ".txt"
        jobs.append((src, tests_dir / out_name))
    return jobs


@click.group()
@click.version_option(__version__, prog_name="rat25f")
def main() -> None:
    """The Rat25F lexer and syntax checker."""


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--start",
    type=click.Choice(list(_START_CHOICES)),
    default="program",
    show_default=True,
    help="Grammar start symbol.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to rat25f.toml (default: nearest one above the first file).",
)
@click.option("--no-echo", is_flag=True, help="Do not echo matched tokens.")
@click.option("--all-rules", is_flag=True, help="Trace every rule, not just the configured ones.")
def check(
    files: tuple[str, ...],
    start: str,
    config_path: str | None,
    no_echo: bool,
    all_rules: bool,
) -> None:
    """Check Rat25F source files, printing the production trace."""
    try:
        config = resolve_config(
            Path(config_path) if config_path else None, Path(files[0]),
        )
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    if no_echo:
        config.policy = dataclasses.replace(config.policy, echo_tokens=False)
    if all_rules:
        config.trace = dataclasses.replace(config.trace, rules=frozenset())

    renderer = DiagnosticRenderer(color=True)
    had_errors = False
    for file in files:
        source = Path(file).read_text(encoding=SOURCE_ENCODING)
        renderer.add_source(file, source)
        error = _parse_source(source, config, ConsoleSink(), _START_CHOICES[start])
        if error is None:
            click.echo(SUCCESS_LINE)
        else:
            had_errors = True
            click.echo(renderer.render(error.to_diagnostic(file)), err=True)

    if had_errors:
        raise SystemExit(1)


@main.command()
@click.argument("paths", nargs=-1, type=click.Path())
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to rat25f.toml (default: nearest one above the working directory).",
)
def run(paths: tuple[str, ...], config_path: str | None) -> None:
    """Batch mode: parse each INPUT and write its trace to OUTPUT.

    Arguments come in INPUT OUTPUT pairs. With no arguments,
    tests/test*.rat25f are processed into tests/output*.txt.
    """
    if len(paths) % 2:
        raise click.UsageError("arguments must be INPUT OUTPUT pairs")

    try:
        config = resolve_config(Path(config_path) if config_path else None)
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    if paths:
        jobs = [(Path(paths[i]), Path(paths[i + 1])) for i in range(0, len(paths), 2)]
    else:
        jobs = _default_jobs(Path())
        if not jobs:
            click.echo("warning: no tests/test*.rat25f files found", err=True)
            return

    failed = False
    for src, out in jobs:
        if not paths:
            click.echo(f"==> {src} -> {out}", err=True)
        try:
            source = src.read_text(encoding=SOURCE_ENCODING)
        except OSError:
            click.echo(f"error: cannot open input file: {src}", err=True)
            failed = True
            continue
        try:
            with open(out, "w") as fh:
                error = _parse_source(source, config, ConsoleSink(fh))
                click.echo(SUCCESS_LINE if error is None else str(error), file=fh)
        except OSError:
            click.echo(f"error: cannot open output file: {out}", err=True)
            failed = True
            continue
        if error is not None:
            failed = True

    if failed:
        raise SystemExit(1)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def tokens(file: str) -> None:
    """Print the token stream of a Rat25F source file."""
    with open(file, encoding=SOURCE_ENCODING) as fh:
        for tok in Lexer(fh):
            click.echo(tok.describe())
