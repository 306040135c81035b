"""Pure validators for the text and round arguments.

Both validators are stateless and order-independent.  The CLI calls
them before any network client is constructed, so malformed input can
never trigger a network request.
"""

from __future__ import annotations

import re

from tlock_wrap.exceptions import ValidationError

MAX_SAFE_INTEGER: int = 2**53 - 1
"""Largest round accepted; every smaller integer is exactly representable
as an IEEE-754 double, which is how drand clients commonly carry rounds."""

_INTEGER_TOKEN = re.compile(r"^[+-]?[0-9]+$")

_ROUND_HINT = f"Use a whole number between 1 and {MAX_SAFE_INTEGER}."


def validate_text(text: str) -> str:
    """Return *text* unchanged, or raise if it is blank or not encodable.

    Undecodable command-line bytes reach ``sys.argv`` as lone surrogates,
    which cannot be encoded to UTF-8 for the encrypter.
    """
    if not text.strip():
        raise ValidationError("Text cannot be empty.")
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValidationError(
            "Text is not valid UTF-8.",
            hint="Check the terminal encoding or pass the text as UTF-8.",
        ) from exc
    return text


def validate_round(value: object) -> int:
    """Return *value* as an ``int`` if it is a valid round number.

    Integral floats (``100.0``) are normalised to ``int``; booleans,
    fractional numbers and anything outside ``1..MAX_SAFE_INTEGER``
    are rejected.
    """
    if isinstance(value, bool):
        raise ValidationError("Round must be a positive integer.", hint=_ROUND_HINT)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError("Round must be a positive integer.", hint=_ROUND_HINT)
        value = int(value)
    if not isinstance(value, int):
        raise ValidationError("Round must be a positive integer.", hint=_ROUND_HINT)
    if value < 1:
        raise ValidationError("Round must be a positive integer.", hint=_ROUND_HINT)
    if value > MAX_SAFE_INTEGER:
        raise ValidationError("Round number is too large.", hint=_ROUND_HINT)
    return value


def parse_round(raw: str) -> int:
    """Convert a command-line token into a validated round number.

    Only plain ASCII decimal integers are accepted: ``"1.5"``, ``"1e3"``,
    ``"12abc"`` and non-ASCII digits are all rejected rather than
    truncated or transliterated.
    """
    token = raw.strip()
    if not _INTEGER_TOKEN.match(token):
        raise ValidationError(
            f"Round must be a positive integer, got {raw!r}.",
            hint=_ROUND_HINT,
        )
    return validate_round(int(token))
