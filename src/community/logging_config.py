"""Logging configuration with credential masking."""

import logging
import re

# (pattern, replacement) pairs applied to messages and string args
SENSITIVE_PATTERNS = [
    (re.compile(r'password["\']?\s*[:=]\s*["\']?([^"\'\s,}]+)', re.IGNORECASE), "password=***"),
    (re.compile(r'api[_-]?key["\']?\s*[:=]\s*["\']?([^"\'\s,}]+)', re.IGNORECASE), "api_key=***"),
    (re.compile(r'token["\']?\s*[:=]\s*["\']?([^"\'\s,}]+)', re.IGNORECASE), "token=***"),
    (re.compile(r"Bearer\s+([A-Za-z0-9\-._~+/]+=*)", re.IGNORECASE), "Bearer ***"),
    (re.compile(r"eyJ[A-Za-z0-9\-._~+/]+=*"), "***JWT***"),
]


def mask_sensitive(text: str) -> str:
    """Replace credentials in a string with placeholders."""
    for pattern, replacement in SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SensitiveDataFilter(logging.Filter):
    """Mask passwords, keys and session tokens before records are emitted."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = mask_sensitive(record.msg)

        if record.args and isinstance(record.args, tuple):
            record.args = tuple(
                mask_sensitive(arg) if isinstance(arg, str) else arg for arg in record.args
            )

        return True


def setup_logging(settings) -> None:
    """
    Configure root logging for the service.

    Args:
        settings: Application settings instance
    """
    handler = logging.StreamHandler()
    handler.addFilter(SensitiveDataFilter())

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[handler],
        force=True,  # Override any existing configuration
    )
