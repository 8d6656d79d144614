"""
SecretSift - Secret Detection Pre-Filter and Analyzer

Decides which files in a filesystem or extracted image layer are worth
inspecting for leaked credentials, sniffs out binary content, and hands
eligible text to a rule-based secret scanner:
- Binary-vs-text detection on a bounded prefix
- Deny-lists for lockfiles, dependency directories, and media extensions
- Path allow-rules from the secret scanner configuration
- Console and JSON reporting

Licensed under the Apache License 2.0
"""

__version__ = "1.0.0"
__author__ = "chiakiichan"


__all__ = [
    "__version__",
]
