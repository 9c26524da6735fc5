"""Tests for password hashing."""
from security import hash_password, verify_password, is_hashed


def test_hash_is_salted_and_verifies():
    first = hash_password("secret")
    second = hash_password("secret")
    assert first != second
    assert is_hashed(first)
    assert verify_password("secret", first)
    assert not verify_password("Secret", first)


def test_plaintext_legacy_value_requires_exact_match():
    assert verify_password("secret", "secret")
    assert not verify_password("secret ", "secret")
    assert not is_hashed("secret")


def test_missing_stored_password_never_matches():
    assert not verify_password("secret", None)
    assert not verify_password("", "")
