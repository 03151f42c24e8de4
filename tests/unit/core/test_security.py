"""Tests for password hashing and signup input helpers."""

import pytest

from src.lingomate.core.security import (
    AVATAR_COUNT,
    hash_password,
    is_valid_email,
    random_avatar_url,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("correct-horse", rounds=4)

        assert hashed != "correct-horse"
        assert hashed.startswith("$2")
        assert verify_password("correct-horse", hashed)
        assert not verify_password("wrong-horse", hashed)

    def test_same_password_hashes_differently(self):
        assert hash_password("pw1234", rounds=4) != hash_password("pw1234", rounds=4)

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            hash_password("")

    def test_long_password_is_accepted(self):
        password = "p" * 100
        hashed = hash_password(password, rounds=4)

        assert verify_password(password, hashed)

    @pytest.mark.parametrize(
        "plain,hashed", [("", "$2b$04$abc"), ("pw", ""), ("pw", "not-a-bcrypt-hash")]
    )
    def test_verify_rejects_bad_input(self, plain, hashed):
        assert verify_password(plain, hashed) is False


class TestSignupHelpers:
    @pytest.mark.parametrize(
        "email,valid",
        [
            ("ana@example.com", True),
            (" ana@example.co.uk ", True),
            ("ana@example", False),
            ("ana example@x.com", False),
            ("@example.com", False),
            ("", False),
        ],
    )
    def test_is_valid_email(self, email, valid):
        assert is_valid_email(email) is valid

    def test_random_avatar_url(self):
        url = random_avatar_url()
        index = int(url.rsplit("/", 1)[1].removesuffix(".png"))

        assert url.startswith("https://avatar.iran.liara.run/public/")
        assert 1 <= index <= AVATAR_COUNT
