"""
SecretSift Secret Analyzer

Glue between the host that walks files and the secret scanner:
- required() decides from path and size whether a file is worth reading
- analyze() skips binaries, normalizes content and path, and scans

An analyzer is built once and then shared by concurrent analyze() and
required() calls. init() swaps the scanner and must not run while scans
are in flight.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from secretsift.analyzer.binary import is_binary
from secretsift.analyzer.filter import DEFAULT_DENY_LISTS, DenyLists, required
from secretsift.core.exceptions import AnalysisError
from secretsift.core.finding import Secret
from secretsift.secret.config import parse_config
from secretsift.secret.scanner import ScanArgs, Scanner

logger = logging.getLogger(__name__)

ANALYZER_TYPE = "secret"

# Bump whenever the deny-lists or binary detection change
ANALYZER_VERSION = 1


@dataclass
class AnalyzerOptions:
    secret_config_path: str = ""


@dataclass
class AnalysisInput:
    """A file handed over by the host.

    ``dir`` is the root the file was found under. It is empty for files
    extracted from an image layer, whose paths lack the leading "/".
    """

    file_path: str
    size: int
    content: BinaryIO
    dir: str = ""


@dataclass
class AnalysisResult:
    secrets: list[Secret] = field(default_factory=list)


class SecretAnalyzer:
    """Decides which files to scan for secrets and scans them."""

    def __init__(
        self,
        scanner: Optional[Scanner] = None,
        config_path: str = "",
        deny_lists: DenyLists = DEFAULT_DENY_LISTS,
    ) -> None:
        self.scanner = scanner
        self.config_path = config_path
        self.deny_lists = deny_lists
        self._lock = threading.Lock()

    def init(self, options: AnalyzerOptions) -> None:
        """
        Load the scanner configuration and build the scanner.

        A no-op when the config path is unchanged and a scanner already
        exists. On error the previous scanner is kept.

        Raises:
            SecretConfigError: the configuration could not be loaded.
        """
        config_path = options.secret_config_path
        with self._lock:
            if config_path == self.config_path and not _is_empty(self.scanner):
                return

            config = parse_config(config_path)
            self.scanner = Scanner(config)
            self.config_path = config_path

    def type(self) -> str:
        return ANALYZER_TYPE

    def version(self) -> int:
        return ANALYZER_VERSION

    def required(self, file_path: str, size: int) -> bool:
        scanner = self._get_scanner()
        return required(file_path, size, self.config_path, scanner.allow_path, self.deny_lists)

    def analyze(self, file_input: AnalysisInput) -> Optional[AnalysisResult]:
        """
        Scan one file.

        Returns None when the file is binary, when its head cannot be
        read, or when nothing was found.

        Raises:
            AnalysisError: the full content could not be read.
        """
        try:
            binary = is_binary(file_input.content, file_input.size)
        except OSError as e:
            logger.debug("Cannot sniff %s, skipping: %s", file_input.file_path, e)
            return None
        if binary:
            logger.debug("Skipping binary file %s", file_input.file_path)
            return None

        try:
            content = file_input.content.read()
        except OSError as e:
            raise AnalysisError(file_input.file_path, "read error") from e

        content = content.replace(b"\r", b"")

        file_path = file_input.file_path
        if file_input.dir == "":
            file_path = f"/{file_path}"

        result = self._get_scanner().scan(ScanArgs(file_path=file_path, content=content))

        if not result.findings:
            return None

        return AnalysisResult(secrets=[result])

    def _get_scanner(self) -> Scanner:
        # Tools embedding the analyzer may never call init()
        if self.scanner is None:
            with self._lock:
                if self.scanner is None:
                    self.scanner = Scanner(parse_config(self.config_path))
        return self.scanner


def _is_empty(scanner: Optional[Scanner]) -> bool:
    return scanner is None or scanner.is_empty()
