"""Escaping of user text for literal use inside regular expressions."""

import re

# . * + ? ^ $ { } ( ) | [ ] \
_SPECIAL_CHARS = re.compile(r"[.*+?^${}()|\[\]\\]")


def escape_pattern(text: str) -> str:
    """Backslash-escape every regex metacharacter in text.

    Only the characters that carry meaning in a non-verbose pattern are
    touched, so whitespace and punctuation such as '>' stay as they are.
    """
    return _SPECIAL_CHARS.sub(lambda m: "\\" + m.group(0), text)
