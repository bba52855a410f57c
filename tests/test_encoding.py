"""
Tests for the hex and base64 signature encodings.
"""

import pytest

from urlsigner.encoding import (
    BASE64_ENCODING,
    HEX_ENCODING,
    Base64Encoding,
    Encoding,
    HexEncoding,
    get_encoding,
)
from urlsigner.error_handling import ConfigurationError, DecodeError


class TestHexEncoding:
    """Test lowercase hexadecimal encoding."""

    def test_encode_is_lowercase_without_separators(self):
        assert HEX_ENCODING.encode(b"\x00\xab\xff") == "00abff"

    def test_empty_round_trip(self):
        assert HEX_ENCODING.encode(b"") == ""
        assert HEX_ENCODING.decode("") == b""

    def test_decode(self):
        assert HEX_ENCODING.decode("00abff") == b"\x00\xab\xff"

    @pytest.mark.parametrize("value", ["zz", "0g", "ab cd", "ABCD", "ab\n"])
    def test_decode_rejects_characters_outside_alphabet(self, value):
        with pytest.raises(DecodeError):
            HEX_ENCODING.decode(value)

    def test_decode_rejects_odd_length(self):
        with pytest.raises(DecodeError):
            HEX_ENCODING.decode("abc")


class TestBase64Encoding:
    """Test unpadded URL-safe base64 encoding."""

    def test_encode_has_no_padding(self):
        assert BASE64_ENCODING.encode(b"a") == "YQ"
        assert BASE64_ENCODING.encode(b"ab") == "YWI"
        assert BASE64_ENCODING.encode(b"abc") == "YWJj"

    def test_encode_uses_url_safe_alphabet(self):
        encoded = BASE64_ENCODING.encode(b"\xfb\xff\xbf")
        assert encoded == "-_-_"
        assert "+" not in encoded and "/" not in encoded

    def test_empty_round_trip(self):
        assert BASE64_ENCODING.encode(b"") == ""
        assert BASE64_ENCODING.decode("") == b""

    def test_decode(self):
        assert BASE64_ENCODING.decode("YWI") == b"ab"
        assert BASE64_ENCODING.decode("-_-_") == b"\xfb\xff\xbf"

    @pytest.mark.parametrize("value", ["YWI=", "YW+j", "YW/j", "YW j", "Y!Jj"])
    def test_decode_rejects_characters_outside_alphabet(self, value):
        with pytest.raises(DecodeError):
            BASE64_ENCODING.decode(value)

    def test_decode_rejects_impossible_length(self):
        with pytest.raises(DecodeError):
            BASE64_ENCODING.decode("YWJjZ")

    def test_decode_rejects_non_zero_trailing_bits(self):
        assert BASE64_ENCODING.decode("YQ") == b"a"
        with pytest.raises(DecodeError, match="non-canonical"):
            BASE64_ENCODING.decode("YR")


class TestGetEncoding:
    """Test encoding lookup."""

    def test_lookup_by_name(self):
        assert get_encoding("hex") is HEX_ENCODING
        assert get_encoding("base64") is BASE64_ENCODING
        assert get_encoding("HEX") is HEX_ENCODING

    def test_instances_pass_through(self):
        custom = HexEncoding()
        assert get_encoding(custom) is custom
        assert isinstance(get_encoding("base64"), Base64Encoding)

    def test_unknown_name(self):
        with pytest.raises(ConfigurationError, match="Unknown encoding"):
            get_encoding("base32")

    def test_third_encoding_can_be_plugged_in(self):
        class ReversedHexEncoding(Encoding):
            name = "reversed-hex"

            def encode(self, data):
                return data.hex()[::-1]

            def decode(self, value):
                return HEX_ENCODING.decode(value[::-1])

        encoding = ReversedHexEncoding()
        assert get_encoding(encoding) is encoding
        assert encoding.decode(encoding.encode(b"\x01\x02")) == b"\x01\x02"
