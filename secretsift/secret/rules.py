"""
SecretSift Detection Rules

Built-in secret rules and allow-rules. A rule's ``regex`` may define a
named group ``secret``; only that part of the match is censored and
reported. Without the group the whole match is the secret.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from secretsift.core.finding import Severity

SECRET_GROUP = "secret"


@dataclass
class AllowRule:
    """Suppresses matches by path or by matched text."""

    id: str
    description: str = ""
    regex: Optional[re.Pattern] = None
    path: Optional[re.Pattern] = None

    def allows_path(self, file_path: str) -> bool:
        return self.path is not None and self.path.search(file_path) is not None

    def allows_match(self, text: str) -> bool:
        return self.regex is not None and self.regex.search(text) is not None


@dataclass
class Rule:
    id: str
    category: str
    title: str
    severity: Severity
    regex: re.Pattern
    keywords: tuple[str, ...] = ()
    path: Optional[re.Pattern] = None
    allow_rules: list[AllowRule] = field(default_factory=list)

    def matches_path(self, file_path: str) -> bool:
        return self.path is None or self.path.search(file_path) is not None

    def matches_keywords(self, lowered: str) -> bool:
        """Cheap pre-filter on the lower-cased content."""
        if not self.keywords:
            return True
        return any(k in lowered for k in self.keywords)


def _rule(id, category, title, severity, pattern, keywords=()):
    return Rule(
        id=id,
        category=category,
        title=title,
        severity=severity,
        regex=re.compile(pattern),
        keywords=tuple(k.lower() for k in keywords),
    )


BUILTIN_RULES: list[Rule] = [
    # ── Cloud Providers ──
    _rule("aws-access-key-id", "AWS", "AWS Access Key ID", Severity.CRITICAL,
          r"(?<![A-Za-z0-9/+])(?P<secret>(?:A3T[A-Z0-9]|AKIA|ASIA|AGPA|AIDA|AROA|AIPA|ANPA|ANVA)[A-Z0-9]{16})(?![A-Za-z0-9/+=])",
          ("AKIA", "ASIA", "AGPA", "AIDA", "AROA", "AIPA", "ANPA", "ANVA", "A3T")),
    _rule("aws-secret-access-key", "AWS", "AWS Secret Access Key", Severity.CRITICAL,
          r"(?i)(?:aws_secret_access_key|aws_secret_key)\s*[=:]\s*['\"]?(?P<secret>[A-Za-z0-9/+=]{40})['\"]?",
          ("aws_secret",)),
    _rule("gcp-api-key", "Google", "GCP API Key", Severity.HIGH,
          r"(?P<secret>AIza[0-9A-Za-z_-]{35})",
          ("AIza",)),
    _rule("gcp-service-account", "Google", "GCP Service Account Key", Severity.CRITICAL,
          r"\"type\"\s*:\s*\"service_account\"",
          ("service_account",)),
    _rule("azure-storage-account-key", "Azure", "Azure Storage Account Key", Severity.CRITICAL,
          r"(?i)(?:AccountKey|storage_account_key)\s*[=:]\s*['\"]?(?P<secret>[A-Za-z0-9+/=]{88})['\"]?",
          ("AccountKey", "storage_account_key")),
    # ── Version Control ──
    _rule("github-pat", "GitHub", "GitHub Personal Access Token", Severity.CRITICAL,
          r"(?P<secret>ghp_[A-Za-z0-9]{36})",
          ("ghp_",)),
    _rule("github-oauth", "GitHub", "GitHub OAuth Access Token", Severity.CRITICAL,
          r"(?P<secret>gho_[A-Za-z0-9]{36})",
          ("gho_",)),
    _rule("github-app-token", "GitHub", "GitHub App Token", Severity.CRITICAL,
          r"(?P<secret>(?:ghu|ghs)_[A-Za-z0-9]{36})",
          ("ghu_", "ghs_")),
    _rule("github-fine-grained-pat", "GitHub", "GitHub Fine-Grained Personal Access Token", Severity.CRITICAL,
          r"(?P<secret>github_pat_[A-Za-z0-9_]{82})",
          ("github_pat_",)),
    _rule("gitlab-pat", "GitLab", "GitLab Personal Access Token", Severity.CRITICAL,
          r"(?P<secret>glpat-[A-Za-z0-9_-]{20,})",
          ("glpat-",)),
    # ── Payment ──
    _rule("stripe-secret-token", "Stripe", "Stripe Secret Key", Severity.CRITICAL,
          r"(?P<secret>sk_live_[A-Za-z0-9]{24,})",
          ("sk_live_",)),
    _rule("stripe-publishable-token", "Stripe", "Stripe Publishable Key", Severity.LOW,
          r"(?P<secret>pk_live_[A-Za-z0-9]{24,})",
          ("pk_live_",)),
    _rule("square-access-token", "Square", "Square Access Token", Severity.CRITICAL,
          r"(?P<secret>sq0atp-[A-Za-z0-9_-]{22,})",
          ("sq0atp-",)),
    # ── Communication ──
    _rule("slack-access-token", "Slack", "Slack Token", Severity.HIGH,
          r"(?P<secret>xox[baprs]-[0-9]{10,}-[0-9]{10,}-[A-Za-z0-9]{24,})",
          ("xoxb-", "xoxa-", "xoxp-", "xoxr-", "xoxs-")),
    _rule("slack-web-hook", "Slack", "Slack Webhook", Severity.MEDIUM,
          r"(?P<secret>https://hooks\.slack\.com/services/T[A-Z0-9]{8,}/B[A-Z0-9]{8,}/[A-Za-z0-9]{24,})",
          ("hooks.slack.com",)),
    _rule("sendgrid-api-token", "SendGrid", "SendGrid API Key", Severity.HIGH,
          r"(?P<secret>SG\.[A-Za-z0-9_-]{22}\.[A-Za-z0-9_-]{43})",
          ("SG.",)),
    # ── Package registries ──
    _rule("npm-access-token", "npm", "npm Access Token", Severity.CRITICAL,
          r"(?P<secret>npm_[A-Za-z0-9]{36})",
          ("npm_",)),
    _rule("pypi-upload-token", "PyPI", "PyPI Upload Token", Severity.CRITICAL,
          r"(?P<secret>pypi-AgEIcHlwaS5vcmc[A-Za-z0-9_-]{50,})",
          ("pypi-AgEIcHlwaS5vcmc",)),
    _rule("dockerhub-pat", "Docker", "Docker Hub Personal Access Token", Severity.HIGH,
          r"(?P<secret>dckr_pat_[A-Za-z0-9_-]{27,})",
          ("dckr_pat_",)),
    # ── Infrastructure ──
    _rule("hashicorp-vault-token", "HashiCorp", "HashiCorp Vault Token", Severity.CRITICAL,
          r"(?P<secret>hvs\.[A-Za-z0-9_-]{24,})",
          ("hvs.",)),
    _rule("digitalocean-pat", "DigitalOcean", "DigitalOcean Personal Access Token", Severity.CRITICAL,
          r"(?P<secret>dop_v1_[a-f0-9]{64})",
          ("dop_v1_",)),
    # ── Private Keys ──
    _rule("private-key", "AsymmetricPrivateKey", "Asymmetric Private Key", Severity.HIGH,
          r"-----BEGIN\s?(?:RSA|DSA|EC|OPENSSH|PGP|ENCRYPTED)?\s?PRIVATE KEY(?: BLOCK)?-----"
          r"(?P<secret>[\s\S]*?)-----END",
          ("-----BEGIN",)),
]


def _allow_path(id, description, pattern):
    return AllowRule(id=id, description=description, path=re.compile(pattern))


BUILTIN_ALLOW_RULES: list[AllowRule] = [
    _allow_path("tests", "Avoid test files and paths", r"(?:^|/)(?:test|tests|testdata)/"),
    _allow_path("examples", "Avoid example files and paths", r"(?:^|/)examples?/"),
    _allow_path("vendor", "Vendored dependencies", r"(?:^|/)vendor/"),
    _allow_path("usr-dirs", "System documentation and headers", r"^/?usr/(?:share|include)/"),
    _allow_path("locale-dir", "Locale directories", r"(?:^|/)locales?/"),
    _allow_path("markdown", "Markdown files", r"\.md$"),
]
