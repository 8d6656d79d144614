"""
Pytest Configuration and Fixtures

Shared fixtures for SecretSift tests.
"""

import io
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from secretsift.analyzer.secret import SecretAnalyzer
from secretsift.core.finding import Secret, SecretFinding, Severity
from secretsift.secret.scanner import Scanner

GITHUB_TOKEN = "ghp_" + "a1B2c3D4e5F6g7H8i9J0k1L2m3N4o5P6q7R8"


class FailingStream(io.BytesIO):
    """A stream whose reads always fail."""

    def read(self, *args, **kwargs):
        raise OSError("disk on fire")


class RecordingScanner(Scanner):
    """Scanner that remembers what it was asked to scan."""

    def __init__(self, findings=None) -> None:
        super().__init__()
        self.calls = []
        self._findings = findings or []

    def scan(self, args):
        self.calls.append(args)
        return Secret(file_path=args.file_path, findings=list(self._findings))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_finding() -> SecretFinding:
    """Create a sample finding for testing."""
    return SecretFinding(
        rule_id="github-pat",
        category="GitHub",
        severity=Severity.CRITICAL,
        title="GitHub Personal Access Token",
        start_line=3,
        end_line=3,
        code="token = ****",
        match="****",
    )


@pytest.fixture
def analyzer() -> SecretAnalyzer:
    """Analyzer with the built-in rules."""
    return SecretAnalyzer(scanner=Scanner())


@pytest.fixture
def secrets_tree(temp_dir: Path) -> Path:
    """Create a small source tree with secrets in some files."""
    (temp_dir / "app").mkdir()
    (temp_dir / "app" / "settings.py").write_text(
        f'DEBUG = True\nGITHUB_TOKEN = "{GITHUB_TOKEN}"\n'
    )
    (temp_dir / "app" / "clean.py").write_text("print('hello world')\n")
    (temp_dir / "node_modules" / "pkg").mkdir(parents=True)
    (temp_dir / "node_modules" / "pkg" / "index.js").write_text(
        f'const token = "{GITHUB_TOKEN}";\n'
    )
    (temp_dir / "yarn.lock").write_text(f"# {GITHUB_TOKEN}\n")
    (temp_dir / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 64)
    (temp_dir / "data.dat").write_bytes(b"\x00\x01\x02" + GITHUB_TOKEN.encode())
    return temp_dir


@pytest.fixture
def failing_stream() -> FailingStream:
    """A stream that raises OSError on read."""
    return FailingStream(b"some text content")


@pytest.fixture
def recording_scanner_factory():
    """Build scanners that record their ScanArgs and return fixed findings."""
    return RecordingScanner
