"""
Name: Argon2 Password Hasher Tests

Responsibilities:
  - Hash + verify with argon2-cffi (real hasher, cheap parameters)
  - Mismatch and corrupt hashes never raise
"""

import pytest
from app.identity.passwords import Argon2PasswordHasher
from argon2 import PasswordHasher

pytestmark = pytest.mark.unit


@pytest.fixture
def hasher():
    return Argon2PasswordHasher(PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))


class TestArgon2PasswordHasher:
    def test_hash_is_salted_argon2id(self, hasher):
        first = hasher.hash("Str0ngPassw0rd")
        second = hasher.hash("Str0ngPassw0rd")

        assert first.startswith("$argon2id$")
        assert first != second

    def test_verify(self, hasher):
        stored = hasher.hash("Str0ngPassw0rd")

        assert hasher.verify("Str0ngPassw0rd", stored) is True
        assert hasher.verify("Wr0ngPassw0rd", stored) is False

    @pytest.mark.parametrize("corrupt", ["", "not-a-hash", "$argon2id$v=19$broken"])
    def test_corrupt_hash_is_a_mismatch(self, hasher, corrupt):
        assert hasher.verify("Str0ngPassw0rd", corrupt) is False

    def test_needs_rehash_when_parameters_change(self, hasher):
        stored = hasher.hash("Str0ngPassw0rd")

        assert hasher.needs_rehash(stored) is False
        assert Argon2PasswordHasher().needs_rehash(stored) is True
