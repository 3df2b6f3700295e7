"""Tests for password digests."""

import pytest

from easyaccess.core.security import (
    BCRYPT_SCHEME,
    LEGACY_SCHEME,
    digest,
    get_password_hash,
    is_bcrypt_hash,
    verify_password,
)


class TestDigest:
    @pytest.mark.parametrize(
        ("plaintext", "expected"),
        [
            ("", "0"),
            ("a", "61"),
            ("ab", "c21"),
            ("abc", "17862"),
            ("hello", "5e918d2"),
        ],
    )
    def test_known_values(self, plaintext: str, expected: str):
        assert digest(plaintext) == expected

    def test_wraps_to_signed_32_bit(self):
        # 31-multiplier string hash of this word is exactly -2**31
        assert digest("polygenelubricants") == "-80000000"

    def test_deterministic(self):
        assert digest("secret1") == digest("secret1")

    def test_different_passwords_differ(self):
        assert digest("secret1") != digest("secret2")

    def test_uses_utf16_code_units(self):
        # U+1F600 is the surrogate pair D83D DE00
        expected = ((0xD83D * 31 + 0xDE00) & 0xFFFFFFFF)
        assert digest("\U0001F600") == format(expected, "x")


class TestPasswordHash:
    def test_legacy_scheme_is_digest(self):
        assert get_password_hash("secret1", LEGACY_SCHEME) == digest("secret1")

    def test_unknown_scheme_rejected(self):
        with pytest.raises(ValueError):
            get_password_hash("secret1", "md5")

    def test_bcrypt_scheme_is_salted(self):
        first = get_password_hash("secret1", BCRYPT_SCHEME)
        second = get_password_hash("secret1", BCRYPT_SCHEME)

        assert is_bcrypt_hash(first)
        assert first != second


class TestVerifyPassword:
    def test_legacy_match(self):
        assert verify_password("secret1", digest("secret1"))

    def test_legacy_mismatch(self):
        assert not verify_password("wrong", digest("secret1"))

    def test_bcrypt_match(self):
        stored = get_password_hash("secret1", BCRYPT_SCHEME)
        assert verify_password("secret1", stored)
        assert not verify_password("wrong", stored)

    def test_legacy_digest_is_not_bcrypt(self):
        assert not is_bcrypt_hash(digest("secret1"))
