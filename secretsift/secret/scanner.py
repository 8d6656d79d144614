"""
SecretSift Secret Scanner

Applies detection rules to file content that the analyzer has already
decided is eligible text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from secretsift.core.finding import Secret, SecretFinding
from secretsift.secret.config import ScannerConfig
from secretsift.secret.rules import (
    BUILTIN_ALLOW_RULES,
    BUILTIN_RULES,
    SECRET_GROUP,
    AllowRule,
    Rule,
)

logger = logging.getLogger(__name__)

MAX_CODE_LENGTH = 200


@dataclass
class ScanArgs:
    file_path: str
    content: bytes


class Scanner:
    """
    Rule-based secret scanner.

    With no config the built-in rules and allow-rules are used as is.
    """

    def __init__(self, config: Optional[ScannerConfig] = None) -> None:
        config = config or ScannerConfig()

        rules = list(BUILTIN_RULES)
        if config.enable_builtin_rule_ids:
            rules = [r for r in rules if r.id in config.enable_builtin_rule_ids]
        rules.extend(config.custom_rules)
        self.rules: list[Rule] = [r for r in rules if r.id not in config.disable_rule_ids]

        allow_rules = list(BUILTIN_ALLOW_RULES) + list(config.custom_allow_rules)
        self.allow_rules: list[AllowRule] = [
            r for r in allow_rules if r.id not in config.disable_allow_rule_ids
        ]

    def is_empty(self) -> bool:
        return not self.rules and not self.allow_rules

    def allow_path(self, file_path: str) -> bool:
        """Return True if a global allow-rule covers ``file_path``."""
        return any(r.allows_path(file_path) for r in self.allow_rules)

    def scan(self, args: ScanArgs) -> Secret:
        """Scan content and return every non-allowed match."""
        if self.allow_path(args.file_path):
            logger.debug("Skipping allowed path %s", args.file_path)
            return Secret(file_path=args.file_path)

        text = args.content.decode("utf-8", errors="replace")
        lowered = text.lower()
        findings: list[SecretFinding] = []

        for rule in self.rules:
            if not rule.matches_path(args.file_path):
                continue
            if any(a.allows_path(args.file_path) for a in rule.allow_rules):
                continue
            if not rule.matches_keywords(lowered):
                continue

            for m in rule.regex.finditer(text):
                if self._allowed(rule, m.group(0)):
                    continue
                findings.append(self._to_finding(rule, text, m))

        findings.sort(key=lambda f: (f.start_line, f.rule_id))
        if findings:
            logger.debug("%d secret(s) found in %s", len(findings), args.file_path)

        return Secret(file_path=args.file_path, findings=findings)

    def _allowed(self, rule: Rule, matched: str) -> bool:
        return any(a.allows_match(matched) for a in rule.allow_rules) or any(
            a.allows_match(matched) for a in self.allow_rules
        )

    @staticmethod
    def _to_finding(rule: Rule, text: str, m) -> SecretFinding:
        if SECRET_GROUP in rule.regex.groupindex and m.group(SECRET_GROUP) is not None:
            start, end = m.span(SECRET_GROUP)
        else:
            start, end = m.span()

        censored = "*" * (end - start)
        line_start = text.rfind("\n", 0, start) + 1
        line_end = text.find("\n", end)
        if line_end == -1:
            line_end = len(text)

        start_line = text.count("\n", 0, start) + 1
        end_line = start_line + text.count("\n", start, end)
        code = text[line_start:start] + censored + text[end:line_end]

        return SecretFinding(
            rule_id=rule.id,
            category=rule.category,
            severity=rule.severity,
            title=rule.title,
            start_line=start_line,
            end_line=end_line,
            code=code[:MAX_CODE_LENGTH],
            match=text[m.start():start] + censored + text[end:m.end()],
        )
