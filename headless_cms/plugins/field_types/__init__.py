"""Field types installed with the headless CMS."""

from . import boolean, datetime, file, long_text, number, ref, text

BUILTIN_FIELD_TYPES = (
    text.plugin,
    long_text.plugin,
    number.plugin,
    boolean.plugin,
    datetime.plugin,
    ref.plugin,
    file.plugin,
)

__all__ = ["BUILTIN_FIELD_TYPES"]
