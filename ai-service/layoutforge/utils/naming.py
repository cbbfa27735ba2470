"""
ai-service/layoutforge/utils/naming.py
Identifier casing helpers for generated Angular code.
"""
import re
from typing import List

_WORD_RE = re.compile(r"[A-Za-z0-9]+")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def split_words(value: str) -> List[str]:
    """Split on anything that is not a letter or digit. Inner capitals are kept."""
    return _WORD_RE.findall(value or "")


def camel_case(value: str) -> str:
    """
    Example:
        >>> camel_case("Sign In")
        'signIn'
    """
    words = split_words(value)
    if not words:
        return ""
    head, *tail = words
    return head[0].lower() + head[1:] + "".join(word[0].upper() + word[1:] for word in tail)


def pascal_case(value: str) -> str:
    """
    Example:
        >>> pascal_case("sign in")
        'SignIn'
    """
    return "".join(word[0].upper() + word[1:] for word in split_words(value))


def kebab_case(value: str) -> str:
    """
    Example:
        >>> kebab_case("primaryColor")
        'primary-color'
    """
    return re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", value).lower()


def is_identifier(value: str) -> bool:
    """True for a valid TypeScript identifier (ASCII subset)"""
    return bool(_IDENTIFIER_RE.match(value or ""))
