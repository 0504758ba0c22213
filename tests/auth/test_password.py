"""Tests for password hashing and validation."""

import pytest

from skillswap.auth.password import (
    PasswordStrengthError,
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("pw123456")
        assert verify_password("pw123456", hashed) is True

    def test_wrong_password_rejected(self):
        hashed = hash_password("correct-horse")
        assert verify_password("wrong-horse", hashed) is False

    def test_hash_is_argon2id(self):
        assert hash_password("pw123456").startswith("$argon2id$")

    def test_hashes_are_salted(self):
        assert hash_password("same-password") != hash_password("same-password")

    def test_garbage_hash_does_not_raise(self):
        assert verify_password("pw123456", "not-a-hash") is False

    def test_fresh_hash_needs_no_rehash(self):
        assert check_needs_rehash(hash_password("pw123456")) is False


class TestPasswordStrength:
    def test_minimum_length_accepted(self):
        validate_password_strength("abc123")  # Should not raise

    def test_empty_password_rejected(self):
        with pytest.raises(PasswordStrengthError):
            validate_password_strength("")

    def test_whitespace_password_rejected(self):
        with pytest.raises(PasswordStrengthError):
            validate_password_strength("        ")

    def test_short_password_rejected(self):
        with pytest.raises(PasswordStrengthError, match="at least 6"):
            validate_password_strength("abc12")

    def test_too_long_password_rejected(self):
        with pytest.raises(PasswordStrengthError):
            validate_password_strength("a" * 129)
