"""Unit tests for HMAC connection authentication"""

import binascii
import hashlib
import hmac

import pytest

from xremote.common.types import Credential
from xremote.server.auth import (
    MalformedTagError,
    MissingDataError,
    MissingTagError,
    authMessage_build,
    authMessage_parse,
    credential_load,
    hash_verify,
    tag_sign,
)

DATA = b"some data related to something"


def _bit_flip(value: bytes, bit: int) -> bytes:
    """Return value with one bit inverted"""
    mutated = bytearray(value)
    mutated[bit // 8] ^= 1 << (bit % 8)
    return bytes(mutated)


class TestHashVerify:
    """Tests for hash_verify"""

    def test_missing_data_raises(self, credential):
        """Empty data is reported before any verification"""
        with pytest.raises(MissingDataError):
            hash_verify(credential, b"", b"something")

    def test_missing_tag_raises(self, credential):
        """Empty tag is reported before any verification"""
        with pytest.raises(MissingTagError):
            hash_verify(credential, b"something", b"")

    def test_garbage_tag_is_false_not_error(self, credential):
        """A wrong tag is a plain False"""
        assert hash_verify(credential, b"something", b"something") is False
        assert hash_verify(credential, b"AAA", b"AAA") is False

    def test_valid_tag(self, credential):
        """Tag from the same secret verifies"""
        assert hash_verify(credential, DATA, tag_sign(credential, DATA)) is True

    def test_tag_matches_reference_hmac(self, credential):
        """Tag is standard HMAC-SHA256"""
        expected = hmac.new(credential.secret, DATA, hashlib.sha256).digest()
        assert tag_sign(credential, DATA) == expected
        assert len(expected) == 32

    def test_tag_from_other_secret_fails(self, credential):
        """Tag made with a different secret does not verify"""
        other = Credential(secret=b"?hhhh?")
        assert hash_verify(credential, DATA, tag_sign(other, DATA)) is False

    def test_single_bit_mutation_of_data_fails(self, credential):
        """Any one-bit change to the data breaks the tag"""
        tag = tag_sign(credential, DATA)
        for bit in range(0, len(DATA) * 8, 7):
            assert hash_verify(credential, _bit_flip(DATA, bit), tag) is False

    def test_single_bit_mutation_of_tag_fails(self, credential):
        """Any one-bit change to the tag is rejected"""
        tag = tag_sign(credential, DATA)
        for bit in range(len(tag) * 8):
            assert hash_verify(credential, DATA, _bit_flip(tag, bit)) is False

    def test_truncated_tag_fails(self, credential):
        """A prefix of the right tag is not accepted"""
        tag = tag_sign(credential, DATA)
        assert hash_verify(credential, DATA, tag[:16]) is False


class TestAuthMessage:
    """Tests for auth message parsing and building"""

    def test_build_then_parse_verifies(self, credential):
        """A built message parses into a verifiable attempt"""
        message = authMessage_build(credential, b"0123456789abcdef")
        attempt = authMessage_parse(message)
        assert attempt.data == b"0123456789abcdef"
        assert hash_verify(credential, attempt.data, attempt.tag) is True

    def test_parse_accepts_uppercase_hex_and_trailing_newline(self, credential):
        """Tag hex is case-insensitive and surrounding whitespace is ignored"""
        tag_hex = binascii.hexlify(tag_sign(credential, DATA[:10])).upper()
        attempt = authMessage_parse(DATA[:10] + b"  " + tag_hex + b"\r\n")
        assert hash_verify(credential, attempt.data, attempt.tag) is True

    def test_parse_missing_tokens_yield_empty_fields(self):
        """Missing tokens are left for hash_verify to report"""
        assert authMessage_parse(b"").data == b""
        only_data = authMessage_parse(b"abcdefghijkl\n")
        assert only_data.data == b"abcdefghijkl"
        assert only_data.tag == b""

    def test_parse_non_hex_tag_raises(self):
        """A tag that is not hex is malformed"""
        with pytest.raises(MalformedTagError):
            authMessage_parse(b"abcdefghijkl nothex!")

    def test_parse_odd_length_hex_raises(self):
        """Odd-length hex cannot be decoded"""
        with pytest.raises(MalformedTagError):
            authMessage_parse(b"abcdefghijkl abc")

    def test_build_rejects_whitespace_data(self, credential):
        """Data must be a single token"""
        with pytest.raises(ValueError):
            authMessage_build(credential, b"two words")
        with pytest.raises(ValueError):
            authMessage_build(credential, b"")


class TestCredentialLoad:
    """Tests for loading the secret file"""

    def test_contents_are_trimmed(self, tmp_path):
        """Surrounding whitespace is not part of the secret"""
        secret_file = tmp_path / "secret.txt"
        secret_file.write_bytes(b"  spooky\n")
        assert credential_load(secret_file).secret == b"spooky"

    def test_empty_secret_raises(self, tmp_path):
        """A blank secret file is refused"""
        secret_file = tmp_path / "secret.txt"
        secret_file.write_bytes(b"\n\n")
        with pytest.raises(ValueError, match="empty"):
            credential_load(secret_file)

    def test_missing_file_raises(self, tmp_path):
        """A missing secret file is an error"""
        with pytest.raises(FileNotFoundError):
            credential_load(tmp_path / "nope.txt")
