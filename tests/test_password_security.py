"""
Tests for rdconfig/crypto - field encryption, blob encryption and keys

Tests cover:
- Encrypt/decrypt of version-prefixed strings and byte strings
- Plaintext passthrough and the rewrite flag
- Length bounds and duplicate-encryption refusal
- Deterministic ciphertext
- Keypair and random password generation
- Blob compression
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rdconfig.constants import CHARS, ENCRYPT_MAX_LEN, NUM_CHARS, PASSWORD_ENC_VERSION
from rdconfig.crypto.compress import compress, decompress
from rdconfig.crypto.password_security import (
    FieldCipher,
    derive_key,
    generate_keypair,
    random_password,
)
from rdconfig.utils.error_handling import SecretError

VERSION = PASSWORD_ENC_VERSION


class TestStrings:
    """String field encryption."""

    @pytest.mark.unit
    def test_roundtrip(self, cipher):
        encrypted = cipher.encrypt_str_or_original("1ü1111", VERSION, ENCRYPT_MAX_LEN)
        assert encrypted.startswith(VERSION)
        assert encrypted != "1ü1111"
        assert cipher.decrypt_str_or_original(encrypted, VERSION) == ("1ü1111", True, False)

    @pytest.mark.unit
    def test_plaintext_passthrough_asks_for_rewrite(self, cipher):
        assert cipher.decrypt_str_or_original("1ü1111", VERSION) == ("1ü1111", False, True)

    @pytest.mark.unit
    def test_empty_string(self, cipher):
        assert cipher.encrypt_str_or_original("", VERSION, ENCRYPT_MAX_LEN) == ""
        assert cipher.decrypt_str_or_original("", VERSION) == ("", False, False)

    @pytest.mark.unit
    def test_version_mismatch_is_plaintext(self, cipher):
        encrypted = cipher.encrypt_str_or_original("secret", VERSION, ENCRYPT_MAX_LEN)
        plain, decrypted, rewrite = cipher.decrypt_str_or_original(encrypted, "01")
        assert plain == encrypted
        assert decrypted is False
        assert rewrite is True

    @pytest.mark.unit
    def test_version_prefix_only(self, cipher):
        assert cipher.decrypt_str_or_original(VERSION, VERSION) == (VERSION, False, True)

    @pytest.mark.unit
    def test_over_max_len_left_plain(self, cipher):
        value = "x" * 17
        assert cipher.encrypt_str_or_original(value, VERSION, 16) == value
        assert cipher.encrypt_str_or_original("x" * 16, VERSION, 16) != "x" * 16

    @pytest.mark.unit
    def test_max_len_counts_bytes(self, cipher):
        # 9 characters, 18 bytes
        value = "é" * 9
        assert cipher.encrypt_str_or_original(value, VERSION, 16) == value

    @pytest.mark.unit
    def test_no_duplicate_encryption(self, cipher):
        once = cipher.encrypt_str_or_original("secret", VERSION, ENCRYPT_MAX_LEN)
        assert cipher.encrypt_str_or_original(once, VERSION, ENCRYPT_MAX_LEN) == once

    @pytest.mark.unit
    def test_deterministic(self, cipher):
        a = cipher.encrypt_str_or_original("secret", VERSION, ENCRYPT_MAX_LEN)
        b = cipher.encrypt_str_or_original("secret", VERSION, ENCRYPT_MAX_LEN)
        c = cipher.encrypt_str_or_original("secret2", VERSION, ENCRYPT_MAX_LEN)
        assert a == b
        assert a != c

    @pytest.mark.unit
    def test_other_key_cannot_decrypt(self, cipher):
        encrypted = cipher.encrypt_str_or_original("secret", VERSION, ENCRYPT_MAX_LEN)
        other = FieldCipher(derive_key(b"another machine"))
        plain, decrypted, _ = other.decrypt_str_or_original(encrypted, VERSION)
        assert plain == encrypted
        assert decrypted is False


class TestBytes:
    """Byte-string field encryption."""

    @pytest.mark.unit
    def test_roundtrip(self, cipher):
        encrypted = cipher.encrypt_vec_or_original("1ü1111".encode(), VERSION, ENCRYPT_MAX_LEN)
        assert encrypted.startswith(VERSION.encode())
        assert cipher.decrypt_vec_or_original(encrypted, VERSION) == ("1ü1111".encode(), True, False)

    @pytest.mark.unit
    def test_passthrough(self, cipher):
        assert cipher.decrypt_vec_or_original(b"plain", VERSION) == (b"plain", False, True)
        assert cipher.decrypt_vec_or_original(b"", VERSION) == (b"", False, False)

    @pytest.mark.unit
    def test_bounds(self, cipher):
        assert cipher.encrypt_vec_or_original(b"", VERSION, 16) == b""
        assert cipher.encrypt_vec_or_original(b"x" * 17, VERSION, 16) == b"x" * 17

    @pytest.mark.unit
    def test_no_duplicate_encryption(self, cipher):
        once = cipher.encrypt_vec_or_original(b"secret", VERSION, ENCRYPT_MAX_LEN)
        assert cipher.encrypt_vec_or_original(once, VERSION, ENCRYPT_MAX_LEN) == once


class TestBlobs:
    """Whole-blob encryption and compression."""

    @pytest.mark.unit
    def test_symmetric_roundtrip(self, cipher):
        data = b"address book" * 10
        encrypted = cipher.symmetric_crypt(data, True)
        assert encrypted != data
        assert cipher.symmetric_crypt(encrypted, False) == data

    @pytest.mark.unit
    def test_bad_blob_raises(self, cipher):
        with pytest.raises(SecretError):
            cipher.symmetric_crypt(b"not a ciphertext at all, too short?", False)
        with pytest.raises(SecretError):
            cipher.symmetric_crypt(b"", False)

    @pytest.mark.unit
    def test_key_length_checked(self):
        with pytest.raises(ValueError):
            FieldCipher(b"short")

    @pytest.mark.unit
    def test_compress_roundtrip(self):
        data = b'{"ab":"' + b"x" * 1000 + b'"}'
        packed = compress(data)
        assert len(packed) < len(data)
        assert decompress(packed) == data

    @pytest.mark.unit
    def test_decompress_garbage_is_empty(self):
        assert decompress(b"definitely not zstd") == b""


class TestKeys:
    """Keypair and password generation."""

    @pytest.mark.unit
    def test_keypair_sizes(self):
        sk, pk = generate_keypair()
        assert len(sk) == 64
        assert len(pk) == 32
        assert sk[32:] == pk

    @pytest.mark.unit
    def test_keypairs_differ(self):
        assert generate_keypair() != generate_keypair()

    @pytest.mark.unit
    def test_random_password_alphabet(self):
        password = random_password(64)
        assert len(password) == 64
        assert set(password) <= set(CHARS)

    @pytest.mark.unit
    def test_random_numeric_password(self):
        password = random_password(6, numeric=True)
        assert len(password) == 6
        assert set(password) <= set(NUM_CHARS)

    @pytest.mark.unit
    def test_derive_key_is_stable(self):
        assert derive_key(b"m") == derive_key(b"m")
        assert len(derive_key(b"m")) == 32
        assert derive_key(b"m") != derive_key(b"n")
