"""
SecretSift Console Reporter

Human-readable colored console output.
"""

from __future__ import annotations

import sys
from collections import Counter

import click

from secretsift import __version__
from secretsift.core.finding import Secret, Severity
from secretsift.core.walker import ScanReport


def _safe_echo(text: str = "", **kwargs) -> None:
    """Echo text, handling Unicode issues on Windows consoles."""
    try:
        click.echo(text, **kwargs)
    except UnicodeEncodeError:
        safe = text.encode(sys.stdout.encoding or "utf-8", errors="replace").decode(
            sys.stdout.encoding or "utf-8", errors="replace"
        )
        click.echo(safe, **kwargs)


# Severity colors
SEVERITY_COLORS = {
    "CRITICAL": "bright_red",
    "HIGH": "red",
    "MEDIUM": "yellow",
    "LOW": "cyan",
    "UNKNOWN": "white",
}


class ConsoleReporter:
    """Prints a formatted secret scan report to the console."""

    def __init__(self, target: str) -> None:
        self.target = target

    def report(self, scan_report: ScanReport) -> None:
        self._print_header(scan_report)
        self._print_severity_summary(scan_report.secrets)

        for secret in scan_report.secrets:
            self._print_secret(secret)

        if scan_report.errors:
            self._print_errors(scan_report)

        self._print_footer(scan_report)

    def _print_header(self, scan_report: ScanReport) -> None:
        _safe_echo("")
        _safe_echo(click.style("=" * 55, fg="bright_blue"))
        _safe_echo(click.style("  SecretSift Secret Scan Report", fg="bright_white", bold=True))
        _safe_echo(click.style(f"  Version: {__version__}", fg="white"))
        _safe_echo(click.style(f"  Target: {self.target}", fg="white"))
        _safe_echo(
            click.style(
                f"  Files: {scan_report.files_scanned} scanned, "
                f"{scan_report.files_skipped} skipped in {scan_report.elapsed:.2f}s",
                fg="bright_black",
            )
        )
        _safe_echo(click.style("=" * 55, fg="bright_blue"))

    def _print_severity_summary(self, secrets: list[Secret]) -> None:
        _safe_echo("")
        _safe_echo(click.style("  Findings Summary:", fg="bright_white", bold=True))
        counter = Counter(f.severity.value for s in secrets for f in s.findings)
        for sev in ["CRITICAL", "HIGH", "MEDIUM", "LOW", "UNKNOWN"]:
            count = counter.get(sev, 0)
            color = SEVERITY_COLORS.get(sev, "white")
            _safe_echo(
                click.style(f"     {sev:10s}: ", fg=color) + click.style(str(count), fg="white")
            )

    def _print_secret(self, secret: Secret) -> None:
        _safe_echo("")
        _safe_echo(click.style(f"  {secret.file_path}", fg="bright_white", bold=True))
        _safe_echo(click.style("-" * 55, fg="bright_black"))

        for finding in sorted(secret.findings, key=lambda f: f.severity, reverse=True):
            sev = finding.severity.value
            color = SEVERITY_COLORS.get(sev, "white")
            _safe_echo(
                click.style(f"   {sev} ", fg=color, bold=True)
                + click.style(f" {finding.title}", fg="bright_white")
                + click.style(f" ({finding.rule_id})", fg="bright_black")
            )
            _safe_echo(
                click.style(f"      Line {finding.start_line}: ", fg="bright_black")
                + click.style(finding.code.strip(), fg="white")
            )

    def _print_errors(self, scan_report: ScanReport) -> None:
        _safe_echo("")
        _safe_echo(click.style("  Errors:", fg="bright_white", bold=True))
        for error in scan_report.errors:
            _safe_echo(click.style(f"    [X] {error}", fg="red"))

    def _print_footer(self, scan_report: ScanReport) -> None:
        _safe_echo("")
        _safe_echo(click.style("=" * 55, fg="bright_blue"))

        if not scan_report.secrets:
            _safe_echo(click.style("  [OK] PASSED - No secrets found", fg="green", bold=True))
        else:
            _safe_echo(
                click.style(
                    f"  [X] {scan_report.findings_count} secret(s) found in "
                    f"{len(scan_report.secrets)} file(s)",
                    fg="bright_red",
                    bold=True,
                )
            )

        _safe_echo(click.style("=" * 55, fg="bright_blue"))
        _safe_echo("")
