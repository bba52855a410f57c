"""
URL Signing Protocol
====================

``SignerProvider`` signs and verifies URLs by embedding an HMAC signature,
and optionally an expiration timestamp, in the query string.

Canonical form:
- The query is re-encoded with keys in ascending order (values of a
  repeated key keep their relative order)
- The fragment is dropped; browsers never send it to a server
- The signature field is never part of the signed bytes; the expiration
  field always is

Verification re-derives the canonical form from the received URL, so any
change to the scheme, host, path, query or expiry breaks the signature.
"""

import logging
import math
import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple, Union
from urllib.parse import SplitResult, parse_qsl, urlencode, urlsplit, urlunsplit

from . import security
from .config import SignerConfig
from .error_handling import (
    Expired,
    InvalidSignature,
    ParseFailure,
    signing_operation_context,
)

logger = logging.getLogger(__name__)

QueryPairs = List[Tuple[str, str]]
ExpireAt = Union[datetime, int, float]
TTL = Union[timedelta, int, float]

# At most 19 digits, so int() never sees an oversized string
_UNIX_SECONDS = re.compile(r"[+-]?[0-9]{1,19}")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def parse_query(query: str) -> QueryPairs:
    """
    Split a raw query string into ordered ``(key, value)`` pairs.

    Percent escapes that are not valid UTF-8 decode to lone surrogates, so
    byte-distinct queries stay distinct and re-encode unchanged.
    """
    return parse_qsl(query, keep_blank_values=True, errors="surrogateescape")


def encode_query(pairs: QueryPairs) -> str:
    """Encode query pairs with keys in ascending order."""
    return urlencode(sorted(pairs, key=lambda pair: pair[0]), errors="surrogateescape")


def get_query_value(pairs: QueryPairs, key: str) -> Optional[str]:
    """Return the first value for ``key``, or None if it is absent."""
    for name, value in pairs:
        if name == key:
            return value
    return None


def set_query_value(pairs: QueryPairs, key: str, value: str) -> QueryPairs:
    """Replace every value for ``key`` with a single ``value``."""
    return delete_query_value(pairs, key) + [(key, value)]


def delete_query_value(pairs: QueryPairs, key: str) -> QueryPairs:
    return [(name, v) for name, v in pairs if name != key]


def canonical_string(url: SplitResult) -> str:
    """
    Serialize a URL into the exact string that gets signed.

    Args:
        url: URL to serialize

    Returns:
        The URL with a sorted query and without its fragment
    """
    canonical = url._replace(query=encode_query(parse_query(url.query)), fragment="")
    return urlunsplit(canonical)


def parse_url(raw_url: str) -> SplitResult:
    """
    Parse a string that must be an absolute URI or an absolute path.

    Args:
        raw_url: URL string

    Returns:
        Parsed URL

    Raises:
        ParseFailure: If the string is empty, syntactically invalid, or
            neither absolute nor rooted at ``/``
    """
    if not isinstance(raw_url, str) or not raw_url:
        raise ParseFailure("failed to parse URL: empty input")

    try:
        url = urlsplit(raw_url)
        # Port parsing is lazy; force it to surface invalid ports
        url.port
    except ValueError as e:
        raise ParseFailure(f"failed to parse URL: {e}") from e

    if not url.scheme and not url.path.startswith("/"):
        raise ParseFailure("failed to parse URL: expected an absolute URI or absolute path")
    if url.scheme and not (url.netloc or url.path):
        raise ParseFailure("failed to parse URL: missing host and path", {"scheme": url.scheme})

    return url


def to_unix_seconds(moment: ExpireAt) -> int:
    """Convert a datetime (naive values are UTC) or Unix time to whole seconds."""
    if isinstance(moment, datetime):
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        moment = moment.timestamp()
    return math.floor(moment)


class SignerProvider:
    """
    Signs and verifies URLs with a shared secret.

    Example:
        >>> signer = SignerProvider(SignerConfig("secret-key"))
        >>> signed = signer.sign_url_with_ttl("https://app.dev/report.pdf", 3600)
        >>> signer.verify_url(signed)
    """

    def __init__(self, config: SignerConfig):
        self.config = config

    def __repr__(self) -> str:
        return f"SignerProvider({self.config!r})"

    def _now(self) -> datetime:
        now = self.config.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now

    def _signature(self, url: SplitResult) -> str:
        return security.sign(
            self.config.algorithm,
            self.config.secret_key,
            canonical_string(url),
            self.config.encoding,
        )

    def sign(self, url: SplitResult) -> SplitResult:
        """
        Sign a URL.

        Args:
            url: URL to sign

        Returns:
            A copy of ``url`` whose sorted query carries the signature field
        """
        signature = self._signature(url)
        pairs = set_query_value(parse_query(url.query), self.config.signature_field, signature)
        logger.debug(f"Signed URL path={url.path!r}")
        return url._replace(query=encode_query(pairs))

    def sign_with_expiry(self, url: SplitResult, expire_at: ExpireAt) -> SplitResult:
        """
        Sign a URL that stops verifying after ``expire_at``.

        The expiration field is added before signing, so it is covered by the
        signature.

        Args:
            url: URL to sign
            expire_at: Expiration as a datetime or Unix seconds

        Returns:
            A copy of ``url`` carrying the expiration and signature fields
        """
        expires = to_unix_seconds(expire_at)
        pairs = set_query_value(
            parse_query(url.query), self.config.expiration_field, str(expires)
        )
        return self.sign(url._replace(query=encode_query(pairs)))

    def sign_with_ttl(self, url: SplitResult, ttl: TTL) -> SplitResult:
        """
        Sign a URL that stays valid for ``ttl`` from now.

        Args:
            url: URL to sign
            ttl: Validity period as a timedelta or seconds

        Returns:
            A copy of ``url`` carrying the expiration and signature fields
        """
        if not isinstance(ttl, timedelta):
            ttl = timedelta(seconds=ttl)
        return self.sign_with_expiry(url, self._now() + ttl)

    def verify(self, url: SplitResult) -> None:
        """
        Verify a signed URL.

        Args:
            url: URL carrying the signature (and optional expiration) fields

        Raises:
            InvalidSignature: If the signature is missing or does not match
            Expired: If the expiration is unparsable or in the past
        """
        pairs = parse_query(url.query)

        signature = get_query_value(pairs, self.config.signature_field)
        if not signature:
            raise InvalidSignature("invalid signature", {"reason": "missing"})

        expires = get_query_value(pairs, self.config.expiration_field)
        if expires:
            self._check_expiry(expires)

        unsigned = url._replace(
            query=encode_query(delete_query_value(pairs, self.config.signature_field)),
            fragment="",
        )
        if not security.verify(self.config.encoding, self._signature(unsigned), signature):
            raise InvalidSignature("invalid signature", {"reason": "mismatch"})

        logger.debug(f"Verified URL path={url.path!r}")

    def _check_expiry(self, expires: str) -> None:
        if not _UNIX_SECONDS.fullmatch(expires):
            raise Expired("url has expired", {"reason": "unparsable expiration"})

        expires_at = int(expires)
        if not _INT64_MIN <= expires_at <= _INT64_MAX:
            raise Expired("url has expired", {"reason": "expiration out of range"})

        if expires_at < self._now().timestamp():
            raise Expired("url has expired", {"expired_at": expires_at})

    def is_valid(self, url: SplitResult) -> bool:
        """Return True if ``url`` verifies, False otherwise."""
        try:
            self.verify(url)
        except (InvalidSignature, Expired):
            return False
        return True

    def sign_url(self, raw_url: str) -> str:
        """Like :meth:`sign` but takes and returns a string."""
        with signing_operation_context("sign_url"):
            return urlunsplit(self.sign(parse_url(raw_url)))

    def sign_url_with_expiry(self, raw_url: str, expire_at: ExpireAt) -> str:
        """Like :meth:`sign_with_expiry` but takes and returns a string."""
        with signing_operation_context("sign_url_with_expiry"):
            return urlunsplit(self.sign_with_expiry(parse_url(raw_url), expire_at))

    def sign_url_with_ttl(self, raw_url: str, ttl: TTL) -> str:
        """Like :meth:`sign_with_ttl` but takes and returns a string."""
        with signing_operation_context("sign_url_with_ttl"):
            return urlunsplit(self.sign_with_ttl(parse_url(raw_url), ttl))

    def verify_url(self, raw_url: str) -> None:
        """
        Like :meth:`verify` but takes a string.

        Raises:
            ParseFailure: If ``raw_url`` is not a valid URL
            InvalidSignature: If the signature is missing or does not match
            Expired: If the expiration is unparsable or in the past
        """
        with signing_operation_context("verify_url"):
            self.verify(parse_url(raw_url))

    def is_valid_url(self, raw_url: str) -> bool:
        """
        Return True if ``raw_url`` verifies, False otherwise.

        Raises:
            ParseFailure: If ``raw_url`` is not a valid URL
        """
        return self.is_valid(parse_url(raw_url))


def create_signer(
    secret_key: Union[bytes, str], config: Optional[SignerConfig] = None, **overrides
) -> SignerProvider:
    """
    Factory function to create a URL signer.

    Args:
        secret_key: Secret key used for every signature
        config: Base configuration whose other settings are reused
        **overrides: Any other SignerConfig field (algorithm, encoding,
            signature_field, expiration_field, clock)

    Returns:
        Configured SignerProvider instance
    """
    if config is None:
        config = SignerConfig(secret_key, **overrides)
    else:
        config = config.replace(secret_key=secret_key, **overrides)
    return SignerProvider(config)
