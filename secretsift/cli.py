"""
SecretSift CLI

Command-line interface for running secret scans.

Commands:
    secretsift scan [PATH]          - Scan a file or directory for secrets
    secretsift init                 - Create a default secretsift.yaml
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from secretsift import __version__
from secretsift.analyzer.secret import AnalyzerOptions, SecretAnalyzer
from secretsift.core.exceptions import SecretConfigError
from secretsift.core.walker import scan_path
from secretsift.reporting.console import ConsoleReporter
from secretsift.reporting.json_reporter import JSONReporter
from secretsift.secret.config import DEFAULT_CONFIG_FILENAME, generate_default_config


def _safe_echo(text: str = "", **kwargs) -> None:
    """Echo text, handling Unicode issues on Windows consoles."""
    try:
        click.echo(text, **kwargs)
    except UnicodeEncodeError:
        safe = text.encode(sys.stdout.encoding or "utf-8", errors="replace").decode(
            sys.stdout.encoding or "utf-8", errors="replace"
        )
        click.echo(safe, **kwargs)


@click.group()
@click.version_option(version=__version__, prog_name="SecretSift")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
def cli(debug: bool) -> None:
    """
    SecretSift - Secret Scanner

    Find leaked credentials in source trees while skipping binaries,
    lockfiles, and dependency directories.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ═══════════════════════════════════════════════════════
#  secretsift scan
# ═══════════════════════════════════════════════════════
@cli.command()
@click.argument("path", type=click.Path(exists=True), default=".")
@click.option("--config", "config_path", type=click.Path(), default=DEFAULT_CONFIG_FILENAME,
              show_default=True, help="Path to the secret scanner configuration file.")
@click.option("--format", "-f", "output_format", type=click.Choice(["console", "json"]),
              default="console", help="Output format.")
@click.option("--output", "-o", "output_file", type=click.Path(), default=None,
              help="Write the JSON report to a file.")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=4, show_default=True,
              help="Number of files analyzed in parallel.")
@click.option("--exit-code", type=int, default=0, show_default=True,
              help="Exit code to use when secrets are found.")
def scan(
    path: str,
    config_path: str,
    output_format: str,
    output_file: Optional[str],
    workers: int,
    exit_code: int,
) -> None:
    """Scan a file or directory for secrets.

    Examples:

        secretsift scan

        secretsift scan ./src --format json --output results.json

        secretsift scan --config ci/secretsift.yaml --exit-code 1
    """
    target = Path(path).resolve()

    analyzer = SecretAnalyzer()
    try:
        analyzer.init(AnalyzerOptions(secret_config_path=config_path))
    except SecretConfigError as exc:
        raise click.UsageError(f"secret config error: {exc}") from exc

    report = scan_path(analyzer, target, workers=workers)

    if output_format == "json":
        json_str = JSONReporter(target=str(target)).report(report, output_file=output_file)
        if not output_file:
            _safe_echo(json_str)
    else:
        ConsoleReporter(target=str(target)).report(report)
        if output_file:
            JSONReporter(target=str(target)).report(report, output_file=output_file)

    if report.secrets and exit_code:
        sys.exit(exit_code)


# ═══════════════════════════════════════════════════════
#  secretsift init
# ═══════════════════════════════════════════════════════
@cli.command()
@click.option("--path", "-p", "target_path", type=click.Path(), default=".",
              help="Directory to create the config file in.")
def init(target_path: str) -> None:
    """Create a default secretsift.yaml."""
    target = Path(target_path).resolve()
    target.mkdir(parents=True, exist_ok=True)

    config_file = target / DEFAULT_CONFIG_FILENAME

    if config_file.exists():
        _safe_echo(click.style(f"  [!] {config_file} already exists, skipping.", fg="yellow"))
    else:
        config_file.write_text(generate_default_config(), encoding="utf-8")
        _safe_echo(click.style(f"  [+] Created {config_file}", fg="green"))

    _safe_echo("")
    _safe_echo("  Edit this file to add rules or allow-rules.")
    _safe_echo("  Run 'secretsift scan' to start scanning.")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
