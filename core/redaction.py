# =============================================================================
# core/redaction.py  —  Credential Masking & Log Previews
# =============================================================================
#
# Everything that ends up in a log line (stderr or the MCP client's log
# stream) goes through these helpers first.  A full API key must never be
# observable, whichever code path produced the log line.
# =============================================================================

import re
from typing import Optional

PREVIEW_LIMIT = 100

_PREFIX = 5
_SUFFIX = 4
# Anything this short would be mostly revealed by prefix + suffix.
_MIN_MASKABLE = 12

_KEY_PARAM = re.compile(r"([?&]key=)([^&]+)")


def mask_secret(secret: Optional[str]) -> str:
    """Keep a short prefix and suffix of ``secret`` and hide the rest."""
    if not secret:
        return "<unset>"
    if len(secret) <= _MIN_MASKABLE:
        return "****"
    return f"{secret[:_PREFIX]}...{secret[-_SUFFIX:]}"


def mask_url(url: str, secret: Optional[str] = None) -> str:
    """Mask the ``key=`` query parameter and any other occurrence of ``secret``."""
    masked = _KEY_PARAM.sub(lambda m: m.group(1) + mask_secret(m.group(2)), url)
    if secret:
        masked = masked.replace(secret, mask_secret(secret))
    return masked


def preview_text(text: str, limit: int = PREVIEW_LIMIT) -> str:
    """Return ``text`` verbatim if short, else its head plus the total length."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... [{len(text)} chars total]"
