"""
Name: Credential Hasher Tests
"""

import pytest

from pizza_service.identity.passwords import CredentialHasher

pytestmark = pytest.mark.unit


def test_hash_is_not_plaintext_and_verifies(hasher):
    hashed = hasher.hash("secret")

    assert hashed != "secret"
    assert hasher.verify("secret", hashed) is True


def test_wrong_password_returns_false(hasher):
    assert hasher.verify("nope", hasher.hash("secret")) is False


@pytest.mark.parametrize("stored", ["", "not-a-hash"])
def test_empty_or_corrupt_hash_returns_false(hasher, stored):
    assert hasher.verify("secret", stored) is False


def test_same_password_hashes_differently():
    hasher = CredentialHasher(time_cost=1)
    assert hasher.hash("secret") != hasher.hash("secret")
