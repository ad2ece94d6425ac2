"""Delimiter-based tokenizing and field lookup for semi-structured OS text."""

from __future__ import annotations

import re

from .errors import FieldMissing, LabelNotFound


class FieldExtractor:
    """Split text on a set of delimiter characters and pick tokens out of it.

    Two lookups are supported: by position in the token sequence, and by offset
    from the first token equal to a label. Tabular sources such as
    ``/proc/meminfo`` pad columns with runs of spaces, so ``drop_empty`` removes
    the empty tokens those runs produce.
    """

    def __init__(self, delimiters: str, drop_empty: bool = False) -> None:
        if not delimiters:
            raise ValueError("at least one delimiter is required")
        self.delimiters = delimiters
        self.drop_empty = drop_empty
        self._pattern = re.compile("[" + re.escape(delimiters) + "]")

    def split(self, text: str) -> list[str]:
        tokens = self._pattern.split(text)
        if self.drop_empty:
            return [t for t in tokens if t]
        return tokens

    def positional(self, text: str, index: int) -> str:
        tokens = self.split(text)
        if index < 0 or index >= len(tokens):
            raise FieldMissing(f"no field at index {index} ({len(tokens)} tokens)")
        return tokens[index]

    def labeled(self, text: str, label: str, offset: int = 1) -> str:
        return self.after_label(self.split(text), label, offset)

    @staticmethod
    def after_label(tokens: list[str], label: str, offset: int = 1) -> str:
        try:
            pos = tokens.index(label)
        except ValueError:
            raise LabelNotFound(label) from None
        target = pos + offset
        if target < 0 or target >= len(tokens):
            raise FieldMissing(f"no field {offset} after label {label!r}")
        return tokens[target]


TEMPERATURE_FIELDS = FieldExtractor("='")
TABULAR_FIELDS = FieldExtractor(" \n", drop_empty=True)
