"""Unit tests for synthetic user id generation."""

import hashlib

from collab.auth import synthetic_id
from collab.auth.synthetic_id import synthetic_github_user_id


def test_known_values():
    """First four SHA-256 bytes, big-endian, sign bit cleared."""
    assert synthetic_github_user_id("alice") == 735577801  # 0x2bd806c9
    assert synthetic_github_user_id("octocat") == 644186455  # 0xa6658157 & 0x7fffffff


def test_deterministic():
    assert synthetic_github_user_id("someone") == synthetic_github_user_id("someone")


def test_fits_positive_int32():
    for i in range(500):
        value = synthetic_github_user_id(f"user-{i}")
        assert 0 < value <= 0x7FFF_FFFF


def test_distinct_over_sample():
    logins = [f"login-{i}" for i in range(2000)]
    assert len({synthetic_github_user_id(login) for login in logins}) == len(logins)


def test_zero_is_replaced_with_one(monkeypatch):
    """A digest whose masked prefix is zero maps to 1."""

    class ZeroDigest:
        def digest(self):
            return bytes([0x80, 0, 0, 0]) + bytes(28)

    monkeypatch.setattr(synthetic_id.hashlib, "sha256", lambda data: ZeroDigest())
    assert synthetic_github_user_id("anything") == 1


def test_uses_sha256_of_utf8():
    digest = hashlib.sha256("bob".encode("utf-8")).digest()
    expected = int.from_bytes(digest[:4], "big") & 0x7FFF_FFFF
    assert synthetic_github_user_id("bob") == (expected or 1)
