"""
SecretSift Filesystem Walker

Feeds every file under a target directory through an analyzer. Files are
analyzed independently: an error on one file is recorded and the walk
goes on.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from secretsift.analyzer.secret import AnalysisInput, AnalysisResult, SecretAnalyzer
from secretsift.core.exceptions import AnalysisError
from secretsift.core.finding import Secret

logger = logging.getLogger(__name__)


@dataclass
class ScanReport:
    """Outcome of scanning a directory tree."""

    secrets: list[Secret] = field(default_factory=list)
    errors: list[AnalysisError] = field(default_factory=list)
    files_scanned: int = 0
    files_skipped: int = 0
    elapsed: float = 0.0

    @property
    def findings_count(self) -> int:
        return sum(len(s.findings) for s in self.secrets)


def walk_files(root: Path) -> Iterator[tuple[str, Path]]:
    """Yield (slash-separated relative path, absolute path) for each file."""
    if root.is_file():
        yield root.name, root
        return

    for file_path in sorted(root.rglob("*")):
        if file_path.is_file() and not file_path.is_symlink():
            yield file_path.relative_to(root).as_posix(), file_path


def _analyze_file(
    analyzer: SecretAnalyzer, root: Path, rel_path: str, file_path: Path, size: int
) -> Optional[AnalysisResult]:
    try:
        with open(file_path, "rb") as f:
            return analyzer.analyze(
                AnalysisInput(file_path=rel_path, size=size, content=f, dir=str(root))
            )
    except OSError as e:
        raise AnalysisError(rel_path, "open error") from e


def scan_path(analyzer: SecretAnalyzer, target: Path, workers: int = 1) -> ScanReport:
    """
    Scan a file or directory tree for secrets.

    Args:
        analyzer: An initialized analyzer.
        target: File or directory to scan.
        workers: Number of files analyzed in parallel.

    Returns:
        ScanReport with secrets sorted by file path.
    """
    root = target if target.is_dir() else target.parent
    report = ScanReport()
    t0 = time.time()

    candidates: list[tuple[str, Path, int]] = []
    for rel_path, file_path in walk_files(target):
        try:
            size = file_path.stat().st_size
        except OSError as e:
            logger.warning("Cannot stat %s: %s", rel_path, e)
            report.errors.append(AnalysisError(rel_path, f"stat error: {e}"))
            continue

        if not analyzer.required(rel_path, size):
            report.files_skipped += 1
            continue
        candidates.append((rel_path, file_path, size))

    def run(candidate: tuple[str, Path, int]):
        rel_path, file_path, size = candidate
        try:
            return _analyze_file(analyzer, root, rel_path, file_path, size), None
        except AnalysisError as e:
            logger.warning("Failed to analyze %s: %s", rel_path, e.__cause__ or e)
            return None, e

    with ThreadPoolExecutor(max_workers=max(1, workers)) as ex:
        for result, error in ex.map(run, candidates):
            if error is not None:
                report.errors.append(error)
                continue
            report.files_scanned += 1
            if result is not None:
                report.secrets.extend(result.secrets)

    report.secrets.sort(key=lambda s: s.file_path)
    report.elapsed = time.time() - t0
    return report
