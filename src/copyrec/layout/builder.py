"""Build a laid-out field tree from level/name/picture/occurs declarations.

Declarations are nested by level number the way a copybook nests them:

    01 ROOT.
       05 A OCCURS 3.
          10 A-A PIC X(2).
          10 A-B PIC X(1) OCCURS 5.
       05 B PIC X(1).

is declared as

    layout = (
        LayoutBuilder()
        .declare(1, "ROOT")
        .declare(5, "A", occurs=3)
        .declare(10, "A-A", "X(2)")
        .declare(10, "A-B", "X(1)", occurs=5)
        .declare(5, "B", "X(1)")
        .finish()
    )

after which "A-B(2)(4)" addresses the fourth A-B inside the second A.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from copyrec.errors import (
    DuplicateFieldNameError,
    FieldNotFoundError,
    IllegalInsertionError,
    InvalidDeclarationError,
    InvalidLevelOrderingError,
    LayoutError,
    NoDescriptorsError,
)
from copyrec.layout.descriptor import FieldDescriptor, parse_picture

logger = logging.getLogger(__name__)


def qualified_name(name: str, *indices: int) -> str:
    """Append 1-based occurrence indices to a field name: ``("E11", 2, 1) -> "E11(2)(1)"``."""
    return name + "".join(f"({i})" for i in indices)


@dataclass(frozen=True, eq=False)
class RecordLayout:
    """A resolved field tree plus its name index; shared read-only by records."""

    root: FieldDescriptor
    size: int
    fields: Mapping[str, FieldDescriptor]

    def field(self, name: str, *indices: int) -> FieldDescriptor:
        key = qualified_name(name, *indices)
        try:
            return self.fields[key]
        except KeyError:
            raise FieldNotFoundError(key) from None

    def leaves(self) -> list[FieldDescriptor]:
        """Fields that own bytes in the buffer, in buffer order."""
        return [f for f in self.root.iter_fields() if f.is_elementary]

    def describe(self) -> list[dict[str, Any]]:
        return [
            {
                "name": f.qualified_name,
                "level": f.level,
                "kind": f.kind.value,
                "offset": f.offset,
                "length": f.length,
                "occurs": f.repeat_count,
            }
            for f in self.root.iter_fields()
        ]

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[str]:
        return (f.qualified_name for f in self.root.iter_fields())

    def __len__(self) -> int:
        return len(self.fields)


def resolve_layout(node: FieldDescriptor, base: int = 0) -> int:
    """Assign offsets/lengths depth-first and return the span of ``node``."""
    node.offset = base
    span = 0
    for child in node.children:
        span += resolve_layout(child, base + span)
    node.length = span + node.declared_length
    return node.length


def build_name_index(root: FieldDescriptor) -> Mapping[str, FieldDescriptor]:
    index: dict[str, FieldDescriptor] = {}
    for f in root.iter_fields():
        if f.qualified_name in index:
            raise DuplicateFieldNameError(f.qualified_name)
        index[f.qualified_name] = f
    return MappingProxyType(index)


class LayoutBuilder:
    """Incrementally assemble a field tree; ``finish()`` resolves it into a layout."""

    def __init__(self) -> None:
        self._root: FieldDescriptor | None = None
        self._names: set[str] = set()
        self._layout: RecordLayout | None = None

    def declare(
        self, level: int, name: str, picture: str | None = None, occurs: int = 1
    ) -> LayoutBuilder:
        if self._layout is not None:
            raise LayoutError(f"Layout already finished; cannot declare {name!r}")
        if level <= 0:
            raise InvalidDeclarationError(f"Level number must be positive: {name!r} has {level}")
        if not name:
            raise InvalidDeclarationError("Field name must not be empty")
        if "(" in name or ")" in name:
            raise InvalidDeclarationError(f"Field name {name!r} must not contain parentheses")
        if occurs < 1:
            raise InvalidDeclarationError(f"OCCURS must be at least 1, got {occurs} for {name!r}")
        if name in self._names:
            raise DuplicateFieldNameError(name)

        kind, width = parse_picture(picture)
        node = FieldDescriptor(
            level=level, name=name, kind=kind, declared_length=width, repeat_count=occurs
        )
        if self._root is None:
            if occurs > 1:
                # the root spans the whole buffer once
                logger.debug("ignoring OCCURS %d on root %s", occurs, name)
                node.repeat_count = 1
            self._root = node
        else:
            # resolve every insertion point before touching the tree
            parents = self._find_parents(self._root, node)
            if not parents:
                raise InvalidLevelOrderingError(name, level)
            for parent in parents:
                parent.children.append(_place(node, parent.index_suffix))
        self._names.add(name)
        logger.debug("declared %s level=%d pic=%s occurs=%d", name, level, picture, occurs)
        return self

    def finish(self) -> RecordLayout:
        if self._root is None:
            raise NoDescriptorsError()
        if self._layout is None:
            size = resolve_layout(self._root)
            self._layout = RecordLayout(
                root=self._root, size=size, fields=build_name_index(self._root)
            )
            logger.debug(
                "layout %s resolved: %d fields, %d bytes", self._root.name, len(self._layout), size
            )
        return self._layout

    def _find_parents(self, node: FieldDescriptor, new: FieldDescriptor) -> list[FieldDescriptor]:
        """Return the fields ``new`` nests under, or [] when ``node`` is not shallower."""
        if node.level >= new.level:
            return []
        if node.is_elementary:
            raise IllegalInsertionError(new.name, node.qualified_name)
        # a container descends into each replica, anything else into its latest child
        branches = node.children if node.is_container else node.children[-1:]
        parents: list[FieldDescriptor] = []
        for branch in branches:
            parents.extend(self._find_parents(branch, new))
        return parents or [node]


def _place(node: FieldDescriptor, index_suffix: str) -> FieldDescriptor:
    if not node.is_container:
        return node.replicate(index_suffix)
    return FieldDescriptor(
        level=node.level,
        name=node.name,
        kind=node.kind,
        repeat_count=node.repeat_count,
        index_suffix=index_suffix,
        children=[
            node.replicate(f"{index_suffix}({i})") for i in range(1, node.repeat_count + 1)
        ],
    )
