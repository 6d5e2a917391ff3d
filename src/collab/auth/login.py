"""Login syntax rules."""

MAX_LOGIN_LENGTH = 39

# ASCII-only folding: non-ASCII letters must never lowercase into a valid login.
_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def _is_ascii_alnum(character: str) -> bool:
    return character.isascii() and character.isalnum()


def is_valid_github_login(github_login: str) -> bool:
    """Return True if ``github_login`` is an acceptable handle.

    At most 39 characters, starting with an ASCII letter or digit and
    followed only by ASCII letters, digits or hyphens.
    """
    if not github_login or len(github_login) > MAX_LOGIN_LENGTH:
        return False

    if not _is_ascii_alnum(github_login[0]):
        return False

    return all(_is_ascii_alnum(c) or c == "-" for c in github_login[1:])


def normalize_login(raw: str) -> str:
    """Trim and ASCII-lowercase a claimed login."""
    return raw.strip().translate(_ASCII_LOWER)
