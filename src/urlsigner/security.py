"""
HMAC Signing Primitive
======================

This module computes and compares HMAC signatures over arbitrary payloads.
The hash algorithm and the signature encoding are both pluggable; the URL
signing protocol in :mod:`urlsigner.provider` is built on top of it.

Security Model:
- HMAC with any fixed-length digest from ``hashlib`` (SHA-256 by default)
- Signatures are compared on their raw bytes in constant time
- A signature that cannot be decoded simply does not match
"""

import hashlib
import hmac
import logging
from typing import Callable, Union

from .encoding import BASE64_ENCODING, Encoding
from .error_handling import ConfigurationError, DecodeError

logger = logging.getLogger(__name__)

Algorithm = Union[str, Callable]


def resolve_algorithm(algorithm: Algorithm) -> Algorithm:
    """
    Validate a hash algorithm for use with HMAC.

    Args:
        algorithm: A ``hashlib`` algorithm name (e.g. ``"sha256"``) or a hash
            constructor (e.g. ``hashlib.sha256``)

    Returns:
        The algorithm, suitable as ``digestmod`` for :func:`hmac.new`

    Raises:
        ConfigurationError: If the algorithm is unknown or not a fixed-length digest
    """
    if isinstance(algorithm, str):
        try:
            digest = hashlib.new(algorithm)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Unknown hash algorithm: {algorithm}",
                {"available": sorted(hashlib.algorithms_available)},
            ) from e
    elif callable(algorithm):
        digest = algorithm()
    else:
        raise ConfigurationError(f"Invalid hash algorithm: {algorithm!r}")

    # SHAKE digests have no fixed length
    if not getattr(digest, "digest_size", 0):
        raise ConfigurationError(
            f"Hash algorithm must produce a fixed-length digest: {digest.name}"
        )
    return algorithm


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def sign(
    algorithm: Algorithm,
    key: Union[str, bytes],
    payload: Union[str, bytes],
    encoding: Encoding = BASE64_ENCODING,
) -> str:
    """
    Create an HMAC signature of a payload.

    Args:
        algorithm: Hash algorithm name or constructor
        key: Secret key (``str`` keys are UTF-8 encoded)
        payload: Data to sign (``str`` payloads are UTF-8 encoded)
        encoding: Encoding applied to the raw MAC bytes

    Returns:
        Encoded signature string
    """
    mac = hmac.new(_to_bytes(key), _to_bytes(payload), algorithm)
    return encoding.encode(mac.digest())


def verify(encoding: Encoding, signature_a: str, signature_b: str) -> bool:
    """
    Tell whether two encoded signatures are equal.

    Both values are decoded first; if either fails to decode the signatures
    are considered different. The raw bytes are compared in constant time.

    Args:
        encoding: Encoding both signatures were produced with
        signature_a: First encoded signature
        signature_b: Second encoded signature

    Returns:
        True if both decode to identical bytes, False otherwise
    """
    try:
        mac_a = encoding.decode(signature_a)
        mac_b = encoding.decode(signature_b)
    except DecodeError:
        logger.debug("Signature could not be decoded, treating as mismatch")
        return False

    return hmac.compare_digest(mac_a, mac_b)
