import hashlib
import logging
from collections.abc import Mapping

# Create the library logger
logger = logging.getLogger("pagefetch")

# Add NullHandler to prevent "No handlers could be found" warnings
# if the application doesn't configure logging.
logger.addHandler(logging.NullHandler())

_SENSITIVE_HEADERS = frozenset({"authorization", "proxy-authorization", "cookie"})


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """
    Redacts credential-bearing headers for logging.
    Hashes the values so two log lines can be correlated without revealing the token.
    """
    redacted: dict[str, str] = {}
    for name, value in headers.items():
        if name.lower() in _SENSITIVE_HEADERS:
            digest = hashlib.sha256(str(value).encode("utf-8")).hexdigest()[:8]
            redacted[name] = f"<redacted:{digest}>"
        else:
            redacted[name] = value
    return redacted
