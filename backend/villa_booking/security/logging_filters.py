"""Logging filters that scrub sensitive content."""

from __future__ import annotations

import logging
import re

_SENSITIVE_PATTERN = re.compile(
    r"(Authorization: Bearer\s+[\w\.-]+|access_token\"\s*:\s*\"[^\"]+\"|password\"\s*:\s*\"[^\"]+\")",
    re.IGNORECASE,
)
# dossier links carry the booking's public token in the path
_DOSSIER_TOKEN_PATTERN = re.compile(r"(/dossier/)[0-9a-f]{16,64}", re.IGNORECASE)
_SIGNED_URL_PATTERN = re.compile(r"(/signed/)[\w\.-]+")


def scrub(message: str) -> str:
    message = _SENSITIVE_PATTERN.sub("**REDACTED**", message)
    message = _DOSSIER_TOKEN_PATTERN.sub(r"\1**REDACTED**", message)
    return _SIGNED_URL_PATTERN.sub(r"\1**REDACTED**", message)


class SensitiveFilter(logging.Filter):
    """Replace sensitive tokens in log messages with a redaction marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = scrub(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                scrub(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True


__all__ = ["SensitiveFilter", "scrub"]
