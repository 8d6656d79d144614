"""
SecretSift Scanner Configuration

Loads custom rules, allow-rules and rule toggles from a YAML file:

    rules:
      - id: internal-token
        category: Internal
        title: Internal service token
        severity: HIGH
        regex: "itk_[a-z0-9]{32}"
        keywords: [itk_]
    allow-rules:
      - id: fixtures
        path: "^fixtures/"
    disable-rules: [slack-web-hook]
    disable-allow-rules: [markdown]
    enable-builtin-rules: [aws-access-key-id, github-pat]
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Optional

import yaml

from secretsift.core.exceptions import SecretConfigError
from secretsift.core.finding import Severity
from secretsift.secret.rules import AllowRule, Rule

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "secretsift.yaml"


@dataclass
class ScannerConfig:
    """Parsed secret scanner configuration."""

    custom_rules: list[Rule] = field(default_factory=list)
    custom_allow_rules: list[AllowRule] = field(default_factory=list)
    disable_rule_ids: list[str] = field(default_factory=list)
    disable_allow_rule_ids: list[str] = field(default_factory=list)
    enable_builtin_rule_ids: list[str] = field(default_factory=list)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "ScannerConfig":
        return cls(
            custom_rules=[_parse_rule(r) for r in data.get("rules") or []],
            custom_allow_rules=[_parse_allow_rule(r) for r in data.get("allow-rules") or []],
            disable_rule_ids=_string_list(data, "disable-rules"),
            disable_allow_rule_ids=_string_list(data, "disable-allow-rules"),
            enable_builtin_rule_ids=_string_list(data, "enable-builtin-rules"),
        )


def parse_config(config_path: str) -> Optional[ScannerConfig]:
    """
    Load the scanner configuration.

    Returns None when no path is given or the file does not exist, in
    which case the scanner runs with its built-in rules.

    Raises:
        SecretConfigError: the file cannot be read or is not a valid config.
    """
    if not config_path:
        return None

    if not os.path.exists(config_path):
        logger.debug("No secret config detected at %s", config_path)
        return None

    logger.info("Loading secret config from %s", config_path)
    try:
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise SecretConfigError(f"cannot read {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise SecretConfigError(f"invalid YAML in {config_path}: {e}") from e

    if raw is None:
        return ScannerConfig()
    if not isinstance(raw, dict):
        raise SecretConfigError(f"{config_path}: top level must be a mapping")

    return ScannerConfig._from_dict(raw)


def _string_list(data: dict[str, Any], key: str, where: str = "config") -> list[str]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise SecretConfigError(f"{where}: {key} must be a list, got {value!r}")
    return [str(v) for v in value]


def _compile(value: Optional[str], where: str) -> Optional[re.Pattern]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SecretConfigError(f"{where}: regex must be a string, got {value!r}")
    try:
        return re.compile(value)
    except re.error as e:
        raise SecretConfigError(f"{where}: invalid regex {value!r}: {e}") from e


def _parse_allow_rule(data: dict[str, Any]) -> AllowRule:
    if not isinstance(data, dict) or "id" not in data:
        raise SecretConfigError(f"allow rule must be a mapping with an id: {data!r}")
    rule_id = str(data["id"])
    return AllowRule(
        id=rule_id,
        description=data.get("description", ""),
        regex=_compile(data.get("regex"), f"allow rule {rule_id}"),
        path=_compile(data.get("path"), f"allow rule {rule_id}"),
    )


def _parse_rule(data: dict[str, Any]) -> Rule:
    if not isinstance(data, dict) or "id" not in data:
        raise SecretConfigError(f"rule must be a mapping with an id: {data!r}")
    rule_id = str(data["id"])
    if not data.get("regex"):
        raise SecretConfigError(f"rule {rule_id}: regex is required")

    severity_name = data.get("severity", "UNKNOWN")
    if not isinstance(severity_name, str):
        raise SecretConfigError(f"rule {rule_id}: severity must be a string, got {severity_name!r}")
    try:
        severity = Severity.from_string(severity_name)
    except KeyError as e:
        raise SecretConfigError(f"rule {rule_id}: unknown severity {data.get('severity')!r}") from e

    return Rule(
        id=rule_id,
        category=data.get("category", "general"),
        title=data.get("title", rule_id),
        severity=severity,
        regex=_compile(data["regex"], f"rule {rule_id}"),
        keywords=tuple(k.lower() for k in _string_list(data, "keywords", f"rule {rule_id}")),
        path=_compile(data.get("path"), f"rule {rule_id}"),
        allow_rules=[_parse_allow_rule(r) for r in data.get("allow-rules") or []],
    )


def generate_default_config() -> str:
    """Generate a default secretsift.yaml configuration file content."""
    return """\
# SecretSift secret scanner configuration

# Custom detection rules (added to the built-in rules)
rules: []
#  - id: internal-token
#    category: Internal
#    title: Internal service token
#    severity: HIGH
#    regex: "itk_(?P<secret>[a-z0-9]{32})"
#    keywords:
#      - itk_

# Paths or matches that are never reported
allow-rules: []
#  - id: fixtures
#    description: Test fixtures
#    path: "^fixtures/"

# Built-in rule IDs to turn off
disable-rules: []

# Built-in allow-rule IDs to turn off
disable-allow-rules: []
"""
