"""
Tests for the Secret Analyzer
"""

import io
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from secretsift.analyzer import secret as secret_module
from secretsift.analyzer.secret import (
    ANALYZER_VERSION,
    AnalysisInput,
    AnalyzerOptions,
    SecretAnalyzer,
)
from secretsift.core.exceptions import AnalysisError, SecretConfigError
from secretsift.core.finding import SecretFinding
from secretsift.secret.config import ScannerConfig
from secretsift.secret.rules import AllowRule
from secretsift.secret.scanner import Scanner
from conftest import GITHUB_TOKEN


def _input(content: bytes, file_path: str = "app/config.txt", dir: str = "/src") -> AnalysisInput:
    return AnalysisInput(file_path=file_path, size=len(content), content=io.BytesIO(content), dir=dir)


class BrokenAfterHead(io.BytesIO):
    """Serves the head read, then fails on the full read."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self._reads = 0

    def read(self, *args, **kwargs):
        self._reads += 1
        if self._reads > 1:
            raise OSError("device went away")
        return super().read(*args, **kwargs)


class TestAnalyze:
    """Tests for SecretAnalyzer.analyze."""

    def test_carriage_returns_stripped(self, recording_scanner_factory):
        scanner = recording_scanner_factory()
        analyzer = SecretAnalyzer(scanner=scanner)

        analyzer.analyze(_input(b"password: hunter2\r\nuser: admin\r\n"))

        assert scanner.calls[0].content == b"password: hunter2\nuser: admin\n"

    def test_leading_slash_added_for_image_files(self, recording_scanner_factory):
        scanner = recording_scanner_factory()
        analyzer = SecretAnalyzer(scanner=scanner)

        analyzer.analyze(_input(b"root:x:0:0:root:/root:/bin/bash\n", "etc/shadow", dir=""))

        assert scanner.calls[0].file_path == "/etc/shadow"

    def test_path_kept_for_filesystem_files(self, recording_scanner_factory):
        scanner = recording_scanner_factory()
        analyzer = SecretAnalyzer(scanner=scanner)

        analyzer.analyze(_input(b"some plain content\n", "app/config.txt", dir="/src"))

        assert scanner.calls[0].file_path == "app/config.txt"

    def test_no_findings_returns_none(self, recording_scanner_factory):
        scanner = recording_scanner_factory()
        analyzer = SecretAnalyzer(scanner=scanner)

        assert analyzer.analyze(_input(b"nothing to see here\n")) is None
        assert len(scanner.calls) == 1

    def test_findings_wrapped_in_result(self, recording_scanner_factory, sample_finding: SecretFinding):
        scanner = recording_scanner_factory(findings=[sample_finding])
        analyzer = SecretAnalyzer(scanner=scanner)

        result = analyzer.analyze(_input(b"token = whatever\n", "etc/app.conf", dir=""))

        assert result is not None
        assert len(result.secrets) == 1
        assert result.secrets[0].file_path == "/etc/app.conf"
        assert result.secrets[0].findings == [sample_finding]

    def test_binary_skipped(self, recording_scanner_factory):
        scanner = recording_scanner_factory()
        analyzer = SecretAnalyzer(scanner=scanner)

        assert analyzer.analyze(_input(b"\x00\x01" + GITHUB_TOKEN.encode())) is None
        assert scanner.calls == []

    def test_head_read_error_skips(self, recording_scanner_factory, failing_stream):
        scanner = recording_scanner_factory()
        analyzer = SecretAnalyzer(scanner=scanner)

        result = analyzer.analyze(AnalysisInput(file_path="a.txt", size=20, content=failing_stream))

        assert result is None
        assert scanner.calls == []

    def test_full_read_error_raises(self, analyzer: SecretAnalyzer):
        stream = BrokenAfterHead(b"plain text content\n")

        with pytest.raises(AnalysisError) as exc_info:
            analyzer.analyze(AnalysisInput(file_path="app/a.txt", size=19, content=stream, dir="/src"))

        assert exc_info.value.file_path == "app/a.txt"
        assert "app/a.txt" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_detects_secret_with_builtin_rules(self, analyzer: SecretAnalyzer):
        content = f'DEBUG = True\r\nGITHUB_TOKEN = "{GITHUB_TOKEN}"\r\n'.encode()

        result = analyzer.analyze(_input(content, "app/settings.py"))

        assert result is not None
        finding = result.secrets[0].findings[0]
        assert finding.rule_id == "github-pat"
        assert finding.start_line == 2
        assert GITHUB_TOKEN not in finding.code

    def test_image_path_allowed_by_absolute_rule(self):
        config = ScannerConfig(
            custom_allow_rules=[AllowRule(id="opt", path=re.compile(r"^/opt/"))]
        )
        analyzer = SecretAnalyzer(scanner=Scanner(config))
        content = f"token = {GITHUB_TOKEN}\n".encode()

        assert analyzer.required("opt/app/env.sh", len(content))
        assert analyzer.analyze(_input(content, "opt/app/env.sh", dir="")) is None
        assert analyzer.analyze(_input(content, "srv/app/env.sh", dir="")) is not None

    def test_concurrent_analyze(self, analyzer: SecretAnalyzer):
        def run(i):
            content = f"# file {i}\ntoken = {GITHUB_TOKEN}\n".encode()
            return analyzer.analyze(_input(content, f"app/file{i}.py"))

        with ThreadPoolExecutor(max_workers=8) as ex:
            results = list(ex.map(run, range(50)))

        assert all(r is not None for r in results)
        assert [r.secrets[0].file_path for r in results] == [f"app/file{i}.py" for i in range(50)]


class TestRequired:
    """Tests for SecretAnalyzer.required."""

    def test_delegates_allow_path_to_scanner(self, analyzer: SecretAnalyzer):
        assert analyzer.required("app/main.py", 100)
        assert not analyzer.required("docs/README.md", 100)

    def test_skips_own_config(self):
        analyzer = SecretAnalyzer(scanner=Scanner(), config_path="secretsift.yaml")
        assert not analyzer.required("secretsift.yaml", 100)

    def test_works_without_init(self):
        analyzer = SecretAnalyzer()
        assert analyzer.required("app/main.py", 100)
        assert not analyzer.required("app/main.py", 9)


class TestInit:
    """Tests for SecretAnalyzer.init."""

    def test_same_config_is_noop(self, monkeypatch):
        scanner = Scanner()
        analyzer = SecretAnalyzer(scanner=scanner, config_path="custom.yaml")

        def fail(_path):
            raise AssertionError("config must not be re-parsed")

        monkeypatch.setattr(secret_module, "parse_config", fail)
        analyzer.init(AnalyzerOptions(secret_config_path="custom.yaml"))

        assert analyzer.scanner is scanner

    def test_empty_scanner_is_rebuilt(self):
        analyzer = SecretAnalyzer(scanner=None, config_path="")
        analyzer.init(AnalyzerOptions())

        assert analyzer.scanner is not None
        assert not analyzer.scanner.is_empty()

    def test_new_config_path_rebuilds(self, temp_dir: Path):
        config = temp_dir / "secretsift.yaml"
        config.write_text(
            "rules:\n"
            "  - id: internal-token\n"
            "    title: Internal token\n"
            "    severity: HIGH\n"
            "    regex: 'itk_[a-z0-9]{32}'\n"
        )
        old = Scanner()
        analyzer = SecretAnalyzer(scanner=old)

        analyzer.init(AnalyzerOptions(secret_config_path=str(config)))

        assert analyzer.scanner is not old
        assert analyzer.config_path == str(config)
        result = analyzer.analyze(_input(b"key = itk_" + b"a" * 32 + b"\n"))
        assert result.secrets[0].findings[0].rule_id == "internal-token"

    def test_config_error_keeps_previous_state(self, temp_dir: Path):
        config = temp_dir / "broken.yaml"
        config.write_text("rules: [unclosed\n")
        old = Scanner()
        analyzer = SecretAnalyzer(scanner=old, config_path="")

        with pytest.raises(SecretConfigError):
            analyzer.init(AnalyzerOptions(secret_config_path=str(config)))

        assert analyzer.scanner is old
        assert analyzer.config_path == ""


def test_type_and_version(analyzer: SecretAnalyzer):
    assert analyzer.type() == "secret"
    assert analyzer.version() == ANALYZER_VERSION == 1
