"""
urlsigner - Tamper-evident, optionally time-limited URLs.

This library appends an HMAC signature, and optionally an expiration
timestamp, to a URL's query string. Any later change to the URL, or use past
its expiration, is detected on verification without server-side state.

Key Features:
- Deterministic canonicalization (sorted query, fragment excluded)
- Pluggable hash algorithm (SHA-256 by default)
- Hex or unpadded URL-safe base64 signatures
- Injectable clock for deterministic expiry checks
- Constant-time signature comparison

Quick Start:
    >>> from urlsigner import create_signer
    >>>
    >>> signer = create_signer("secret-key")
    >>> signed = signer.sign_url_with_ttl("https://app.dev/report.pdf", 3600)
    >>> signer.verify_url(signed)  # raises InvalidSignature or Expired
"""

from .config import SignerConfig, SignerConfigBuilder, load_config_from_dict
from .encoding import (
    BASE64_ENCODING,
    HEX_ENCODING,
    Base64Encoding,
    Encoding,
    HexEncoding,
    get_encoding,
)
from .error_handling import (
    ConfigurationError,
    DecodeError,
    Expired,
    InvalidSignature,
    ParseFailure,
    URLSignerError,
    VerificationError,
)
from .provider import SignerProvider, create_signer, parse_url

__version__ = "0.1.0"

__all__ = [
    # Signer
    "SignerProvider",
    "create_signer",
    "parse_url",
    # Configuration
    "SignerConfig",
    "SignerConfigBuilder",
    "load_config_from_dict",
    # Encodings
    "Encoding",
    "HexEncoding",
    "Base64Encoding",
    "HEX_ENCODING",
    "BASE64_ENCODING",
    "get_encoding",
    # Errors
    "URLSignerError",
    "ConfigurationError",
    "ParseFailure",
    "VerificationError",
    "InvalidSignature",
    "Expired",
    "DecodeError",
    # Version info
    "__version__",
]
