"""
Deterministic GraphQL names derived from content model identifiers.

``product-category`` -> ``ProductCategory`` -> ``ManageProductCategory`` /
``ReadProductCategory`` and ``listProductCategories``.
"""

import re
from functools import lru_cache

import inflect

from headless_cms.exceptions import InvalidModelIdError

_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")
_NAME_RE = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")

_inflect = inflect.engine()


def _words(value: str) -> list[str]:
    return _WORD_RE.findall(value)


@lru_cache(maxsize=None)
def create_type_name(model_id: str) -> str:
    """Upper camel case of the model id, e.g. ``blog-post`` -> ``BlogPost``."""
    type_name = "".join(word.capitalize() for word in _words(model_id))
    if not _NAME_RE.match(type_name):
        raise InvalidModelIdError(model_id)
    return type_name


def create_manage_type_name(type_name: str) -> str:
    return f"Manage{type_name}"


def create_read_type_name(type_name: str) -> str:
    return f"Read{type_name}"


@lru_cache(maxsize=None)
def pluralize(type_name: str) -> str:
    """Pluralize the last word of a type name: ``BlogPost`` -> ``BlogPosts``."""
    words = _words(type_name)
    if not words or words[-1].isdigit():
        return f"{type_name}s"
    last = words[-1]
    prefix = type_name[: len(type_name) - len(last)]
    # inflect keeps capitalised words as proper nouns (Category -> Categorys)
    plural = _inflect.plural_noun(last.lower())
    return prefix + upper_first(plural)


def upper_first(value: str) -> str:
    return value[:1].upper() + value[1:]
