"""
SecretSift JSON Reporter

Generates machine-readable JSON output format:
{
    "version": "1.0",
    "summary": {
        "total_findings": N,
        "files_with_secrets": N,
        "by_severity": {"CRITICAL": n, "HIGH": n, ...}
    },
    "secrets": [...],
    "errors": [...]
}
"""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Optional

from secretsift import __version__
from secretsift.core.walker import ScanReport


class JSONReporter:
    """Generates JSON-formatted scan reports."""

    def __init__(self, target: str) -> None:
        self.target = target

    def report(
        self,
        scan_report: ScanReport,
        output_file: Optional[str] = None,
    ) -> str:
        """
        Generate JSON report.

        Args:
            scan_report: Result of walking the target.
            output_file: Optional file path to write the report to.

        Returns:
            The JSON string.
        """
        counter = Counter(
            f.severity.value for s in scan_report.secrets for f in s.findings
        )

        report_data = {
            "version": "1.0",
            "tool": {
                "name": "SecretSift",
                "version": __version__,
            },
            "target": self.target,
            "summary": {
                "total_findings": scan_report.findings_count,
                "files_with_secrets": len(scan_report.secrets),
                "files_scanned": scan_report.files_scanned,
                "files_skipped": scan_report.files_skipped,
                "by_severity": {
                    sev: counter.get(sev, 0)
                    for sev in ["CRITICAL", "HIGH", "MEDIUM", "LOW", "UNKNOWN"]
                },
            },
            "secrets": [s.to_dict() for s in scan_report.secrets],
            "errors": [
                {"file_path": e.file_path, "message": str(e)} for e in scan_report.errors
            ],
        }

        json_str = json.dumps(report_data, indent=2, default=str)

        if output_file:
            Path(output_file).write_text(json_str, encoding="utf-8")

        return json_str
