"""Synthetic numeric ids for users that have no provider-assigned id."""

import hashlib


def synthetic_github_user_id(github_login: str) -> int:
    """Map a login to a stable, positive 32-bit id.

    The first four bytes of the SHA-256 digest, read big-endian with the sign
    bit cleared. Zero is reserved, so it becomes 1.
    """
    digest = hashlib.sha256(github_login.encode("utf-8")).digest()
    user_id = int.from_bytes(digest[:4], byteorder="big", signed=True) & 0x7FFF_FFFF
    return user_id or 1
