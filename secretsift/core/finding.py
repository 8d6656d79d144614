"""
SecretSift Finding Model

A SecretFinding is one credential match inside a file. A Secret groups
all findings for one file and is what the analyzer hands back to the host.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_string(cls, value: str) -> "Severity":
        """Parse a severity from a string (case-insensitive)."""
        return cls[value.upper()]

    def __ge__(self, other: "Severity") -> bool:
        return _SEVERITY_ORDER.index(self) >= _SEVERITY_ORDER.index(other)

    def __gt__(self, other: "Severity") -> bool:
        return _SEVERITY_ORDER.index(self) > _SEVERITY_ORDER.index(other)

    def __le__(self, other: "Severity") -> bool:
        return not self.__gt__(other)

    def __lt__(self, other: "Severity") -> bool:
        return not self.__ge__(other)


_SEVERITY_ORDER = [
    Severity.UNKNOWN,
    Severity.LOW,
    Severity.MEDIUM,
    Severity.HIGH,
    Severity.CRITICAL,
]


@dataclass
class SecretFinding:
    rule_id: str
    category: str
    severity: Severity
    title: str
    start_line: int
    end_line: int
    code: str = ""
    match: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_id": self.rule_id,
            "category": self.category,
            "severity": self.severity.value,
            "title": self.title,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "code": self.code,
            "match": self.match,
        }


@dataclass
class Secret:
    """All findings for a single file."""

    file_path: str
    findings: list[SecretFinding] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for JSON serialization."""
        return {
            "file_path": self.file_path,
            "findings": [f.to_dict() for f in self.findings],
        }
