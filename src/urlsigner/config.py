"""
Configuration Management for urlsigner
======================================

A ``SignerConfig`` holds everything a signer needs: the secret key, the
query field names, the signature encoding, the hash algorithm and the clock.
It is frozen after construction, so one instance can be shared freely
between threads.
"""

import dataclasses
import hashlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .encoding import BASE64_ENCODING, Encoding, get_encoding
from .error_handling import ConfigurationError
from .security import Algorithm, resolve_algorithm

logger = logging.getLogger(__name__)

DEFAULT_SIGNATURE_FIELD = "sig"
DEFAULT_EXPIRATION_FIELD = "exp"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: the current wall-clock time in UTC."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SignerConfig:
    """Immutable signing configuration."""

    secret_key: Union[bytes, str] = field(repr=False)
    signature_field: str = DEFAULT_SIGNATURE_FIELD
    expiration_field: str = DEFAULT_EXPIRATION_FIELD
    encoding: Union[Encoding, str] = BASE64_ENCODING
    algorithm: Algorithm = hashlib.sha256
    clock: Clock = utc_now

    def __post_init__(self):
        """Validate and normalize the configuration."""
        if isinstance(self.secret_key, str):
            object.__setattr__(self, "secret_key", self.secret_key.encode("utf-8"))
        if not isinstance(self.secret_key, (bytes, bytearray)) or not self.secret_key:
            raise ConfigurationError("secret_key must be a non-empty str or bytes")
        object.__setattr__(self, "secret_key", bytes(self.secret_key))

        for name in ("signature_field", "expiration_field"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"{name} must be a non-empty string")

        if self.signature_field == self.expiration_field:
            raise ConfigurationError(
                "signature_field and expiration_field must differ",
                {"field": self.signature_field},
            )

        object.__setattr__(self, "encoding", get_encoding(self.encoding))
        resolve_algorithm(self.algorithm)

        if not callable(self.clock):
            raise ConfigurationError("clock must be callable")

        logger.debug(
            f"Signer configured: fields=({self.signature_field}, {self.expiration_field}), "
            f"encoding={self.encoding.name}, algorithm={self.algorithm_name}"
        )

    @property
    def algorithm_name(self) -> str:
        if isinstance(self.algorithm, str):
            return self.algorithm
        return self.algorithm().name

    def replace(self, **changes) -> "SignerConfig":
        """Return a new validated configuration with ``changes`` applied."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def builder(cls, secret_key: Union[bytes, str]) -> "SignerConfigBuilder":
        """Start a fluent builder for a configuration."""
        return SignerConfigBuilder(secret_key)


class SignerConfigBuilder:
    """
    Fluent builder for :class:`SignerConfig`.

    Example:
        >>> config = (
        ...     SignerConfig.builder("secret")
        ...     .with_encoding("hex")
        ...     .with_signature_field("signature")
        ...     .build()
        ... )
    """

    def __init__(self, secret_key: Union[bytes, str]):
        self._options: Dict[str, Any] = {"secret_key": secret_key}

    def with_algorithm(self, algorithm: Algorithm) -> "SignerConfigBuilder":
        self._options["algorithm"] = algorithm
        return self

    def with_encoding(self, encoding: Union[Encoding, str]) -> "SignerConfigBuilder":
        self._options["encoding"] = encoding
        return self

    def with_signature_field(self, name: str) -> "SignerConfigBuilder":
        self._options["signature_field"] = name
        return self

    def with_expiration_field(self, name: str) -> "SignerConfigBuilder":
        self._options["expiration_field"] = name
        return self

    def with_clock(self, clock: Clock) -> "SignerConfigBuilder":
        self._options["clock"] = clock
        return self

    def build(self) -> SignerConfig:
        return SignerConfig(**self._options)


_LOADABLE_FIELDS = (
    "secret_key",
    "algorithm",
    "encoding",
    "signature_field",
    "expiration_field",
)


def load_config_from_dict(
    data: Mapping[str, Any], secret_key: Optional[Union[bytes, str]] = None
) -> SignerConfig:
    """
    Build a configuration from a plain mapping (e.g. parsed settings).

    Args:
        data: Mapping with any of ``secret_key``, ``algorithm``, ``encoding``,
            ``signature_field`` and ``expiration_field``
        secret_key: Overrides ``data["secret_key"]`` when given

    Returns:
        Validated SignerConfig

    Raises:
        ConfigurationError: If no secret key is available or a value is invalid
    """
    options = {}
    for key, value in data.items():
        if key in _LOADABLE_FIELDS:
            options[key] = value
        else:
            logger.warning(f"Unknown configuration parameter ignored: {key}")

    if secret_key is not None:
        options["secret_key"] = secret_key
    if "secret_key" not in options:
        raise ConfigurationError("secret_key is required")

    return SignerConfig(**options)
