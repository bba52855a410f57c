"""
Signature Encodings
===================

Converts raw MAC bytes to and from a string that can be embedded in a URL
query value. Two interchangeable encodings are provided:

- ``HexEncoding``: lowercase hexadecimal, no separators
- ``Base64Encoding``: RFC 4648 URL-safe alphabet without ``=`` padding

Decoding is strict: the standard library decoders tolerate whitespace and
foreign characters, so the alphabet is checked before decoding.
"""

import base64
import binascii
import logging
import re
from abc import ABC, abstractmethod
from typing import Union

from .error_handling import ConfigurationError, DecodeError

logger = logging.getLogger(__name__)

_HEX_ALPHABET = re.compile(r"[0-9a-f]*")
_BASE64_URL_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


class Encoding(ABC):
    """Interface for signature encodings."""

    name: str = ""

    @abstractmethod
    def encode(self, data: bytes) -> str:
        """
        Encode raw bytes.

        Args:
            data: Raw bytes to encode

        Returns:
            URL-safe string form of ``data``
        """
        pass

    @abstractmethod
    def decode(self, value: str) -> bytes:
        """
        Decode a string produced by :meth:`encode`.

        Args:
            value: Encoded string

        Returns:
            The raw bytes

        Raises:
            DecodeError: If ``value`` is not valid for this encoding
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class HexEncoding(Encoding):
    """Lowercase hexadecimal encoding."""

    name = "hex"

    def encode(self, data: bytes) -> str:
        return data.hex()

    def decode(self, value: str) -> bytes:
        if not _HEX_ALPHABET.fullmatch(value):
            raise DecodeError("invalid hex character")
        if len(value) % 2:
            raise DecodeError("odd-length hex string")
        return bytes.fromhex(value)


class Base64Encoding(Encoding):
    """Unpadded URL-safe base64 encoding."""

    name = "base64"

    def encode(self, data: bytes) -> str:
        return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")

    def decode(self, value: str) -> bytes:
        if not _BASE64_URL_ALPHABET.fullmatch(value):
            raise DecodeError("invalid base64 character")
        # A single trailing symbol can never carry a whole byte
        if len(value) % 4 == 1:
            raise DecodeError("invalid base64 length")
        padded = value + "=" * (-len(value) % 4)
        try:
            data = base64.b64decode(padded, altchars=b"-_", validate=True)
        except binascii.Error as e:
            raise DecodeError(str(e)) from e
        # Unused trailing bits must be zero so every byte string has one encoding
        if self.encode(data) != value:
            raise DecodeError("non-canonical base64")
        return data


HEX_ENCODING = HexEncoding()
BASE64_ENCODING = Base64Encoding()

_ENCODINGS = {
    HEX_ENCODING.name: HEX_ENCODING,
    BASE64_ENCODING.name: BASE64_ENCODING,
}


def get_encoding(encoding: Union[str, Encoding]) -> Encoding:
    """
    Resolve an encoding name or instance.

    Args:
        encoding: ``"hex"``, ``"base64"`` or an :class:`Encoding` instance

    Returns:
        The matching Encoding

    Raises:
        ConfigurationError: If the name is unknown
    """
    if isinstance(encoding, Encoding):
        return encoding

    if isinstance(encoding, str):
        resolved = _ENCODINGS.get(encoding.lower())
        if resolved is not None:
            return resolved

    raise ConfigurationError(
        f"Unknown encoding: {encoding!r}",
        {"available": sorted(_ENCODINGS)},
    )
