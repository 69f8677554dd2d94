"""Log sanitizer - keeps push targets and credentials out of log files.

ntfy topics and web-push relay URLs work like passwords: anyone who knows
them can post to (or subscribe to) the user's notifications.
"""

import re
from typing import Optional
from urllib.parse import urlsplit

# Patterns to detect and redact sensitive data
SENSITIVE_PATTERNS = [
    # Tokens, secrets in key=value format
    (r'(password|secret|token|api_key|apikey|auth|credential)["\s:=]+[^\s,}"\']{8,}',
     r'\1=[REDACTED]'),

    # Bearer tokens
    (r'(Bearer|Basic)\s+[A-Za-z0-9\-_\.]+', r'\1 [REDACTED]'),

    # Generic long alphanumeric strings that look like keys (32+ chars)
    (r'\b[A-Za-z0-9]{32,}\b', '[LONG_TOKEN]'),
]

_COMPILED_PATTERNS = [(re.compile(p, re.IGNORECASE), r) for p, r in SENSITIVE_PATTERNS]


def sanitize_log(text: str, secrets: Optional[list] = None) -> str:
    """Remove sensitive data from text for safe logging.

    Args:
        text: The text to sanitize
        secrets: Known secret values (push topics, relay URLs) to mask verbatim

    Returns:
        Sanitized text with sensitive data replaced by placeholders
    """
    if not text:
        return text

    result = text
    for secret in secrets or []:
        if secret:
            result = result.replace(secret, mask_topic(secret))

    for pattern, replacement in _COMPILED_PATTERNS:
        result = pattern.sub(replacement, result)

    return result


def mask_topic(topic: Optional[str]) -> str:
    """Mask a push topic, keeping the first few characters for debugging."""
    if not topic:
        return "(none)"
    if len(topic) <= 4:
        return "****"
    return f"{topic[:3]}{'*' * (len(topic) - 3)}"


def mask_url(url: Optional[str]) -> str:
    """Reduce a URL to scheme + host so paths/queries carrying secrets are dropped."""
    if not url:
        return "(none)"
    parts = urlsplit(url)
    if not parts.scheme or not parts.netloc:
        return "[URL]"
    return f"{parts.scheme}://{parts.netloc}/..."
