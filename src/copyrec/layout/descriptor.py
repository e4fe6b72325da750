"""Field descriptors and PIC clause parsing.

Supports the subset of PIC clauses that map to fixed-width display text:
- PIC X(n): alphanumeric, right-padded with spaces
- PIC 9(n): unsigned display numeric, left-padded with zeroes
"""

from __future__ import annotations

import copy
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from copyrec.errors import InvalidPictureError

PIC_RE = re.compile(r"([Xx9])\(([0-9]+)\)")


class FieldKind(Enum):
    NUMERIC = "numeric"
    TEXT = "text"

    @property
    def pad(self) -> str:
        return "0" if self is FieldKind.NUMERIC else " "


@dataclass
class FieldDescriptor:
    level: int
    name: str
    kind: FieldKind = FieldKind.TEXT
    declared_length: int = 0
    repeat_count: int = 1
    children: list[FieldDescriptor] = field(default_factory=list)
    index_suffix: str = ""
    # assigned by resolve_layout
    offset: int = 0
    length: int = 0

    @property
    def qualified_name(self) -> str:
        return self.name + self.index_suffix

    @property
    def is_elementary(self) -> bool:
        """True for fields that carry a picture and own bytes in the buffer."""
        return self.declared_length > 0

    @property
    def is_container(self) -> bool:
        """True for an OCCURS field whose children are its replicas."""
        return self.repeat_count > 1

    def replicate(self, index_suffix: str) -> FieldDescriptor:
        """Deep copy this field as a single occurrence placed at ``index_suffix``."""
        clone = copy.deepcopy(self)
        clone.repeat_count = 1
        _reindex(clone, index_suffix)
        return clone

    def iter_fields(self) -> Iterator[FieldDescriptor]:
        """Iterate over this field and all descendants in buffer order."""
        yield self
        for child in self.children:
            yield from child.iter_fields()


def _reindex(node: FieldDescriptor, suffix: str) -> None:
    node.index_suffix = suffix
    for position, child in enumerate(node.children, start=1):
        # replicas sit one index deeper than their container
        _reindex(child, f"{suffix}({position})" if node.is_container else suffix)


def parse_picture(picture: str | None) -> tuple[FieldKind, int]:
    """Return the kind and byte width described by a PIC clause.

    A missing picture declares a group (or zero-width text) field.
    """
    if picture is None:
        return FieldKind.TEXT, 0
    match = PIC_RE.fullmatch(picture)
    if match is None:
        raise InvalidPictureError(picture)
    width = int(match.group(2))
    if width <= 0:
        raise InvalidPictureError(picture)
    kind = FieldKind.NUMERIC if match.group(1) == "9" else FieldKind.TEXT
    return kind, width
