"""Typed access to a fixed-width record buffer described by a RecordLayout.

Values are stored as display text: numeric fields are left-padded with
zeroes, text fields right-padded with spaces, and anything longer than the
field is truncated on the right. Decimal values use an implied decimal point,
so ``set_decimal("INCOME", Decimal("12.34"), 2)`` on a PIC 9(6) stores
``001234``.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from decimal import ROUND_DOWN, Decimal

from copyrec.dates import format_date, parse_date
from copyrec.errors import BufferSizeMismatchError, InvalidNumericValueError
from copyrec.layout.builder import RecordLayout, qualified_name
from copyrec.layout.descriptor import FieldDescriptor, FieldKind

logger = logging.getLogger(__name__)

DEFAULT_CODEPAGE = "latin-1"
INTEGER_RE = re.compile(r"[+-]?[0-9]+")
INT_RANGE = (-(2**31), 2**31 - 1)
LONG_RANGE = (-(2**63), 2**63 - 1)


class Record:
    """One record buffer; the layout may be shared by any number of records."""

    def __init__(
        self, layout: RecordLayout, data: bytes | None = None, *, codepage: str = DEFAULT_CODEPAGE
    ) -> None:
        pads = {kind: kind.pad.encode(codepage) for kind in FieldKind}
        # every character, not just ASCII, must encode to exactly one byte
        sample = "\u00e9".encode(codepage, errors="replace")
        if len(sample) != 1 or any(len(pad) != 1 for pad in pads.values()):
            raise ValueError(f"Codepage {codepage!r} is not a single-byte encoding")
        self.layout = layout
        self.codepage = codepage
        self._pads = pads
        self._buffer = bytearray(layout.size)
        self.initialize()
        if data is not None:
            self.replace_buffer(data)

    @property
    def size(self) -> int:
        return len(self._buffer)

    @property
    def buffer(self) -> bytes:
        return bytes(self._buffer)

    def initialize(self) -> None:
        """Reset every elementary field: PIC 9 to zeroes, PIC X to spaces."""
        for field in self.layout.leaves():
            self._buffer[field.offset : field.offset + field.length] = (
                self._pads[field.kind] * field.length
            )

    def replace_buffer(self, data: bytes, allow_resize: bool = False) -> None:
        """Load ``data`` as the record contents.

        Without ``allow_resize`` the size must match exactly. With it, the
        record is reset first and then overwritten with as many leading bytes
        of ``data`` as fit.
        """
        if not allow_resize:
            if len(data) != self.size:
                raise BufferSizeMismatchError(self.size, len(data))
            self._buffer = bytearray(data)
            return
        if len(data) != self.size:
            logger.debug("resizing %d-byte buffer to %d bytes", len(data), self.size)
        self.initialize()
        usable = min(len(data), self.size)
        self._buffer[:usable] = data[:usable]

    def copy(self) -> Record:
        return Record(self.layout, self.buffer, codepage=self.codepage)

    def get_raw(self, name: str, *indices: int) -> bytes:
        field = self.layout.field(name, *indices)
        return bytes(self._buffer[field.offset : field.offset + field.length])

    def set_raw(
        self, name: str, value: bytes | str | None, kind: FieldKind, *indices: int
    ) -> None:
        field = self.layout.field(name, *indices)
        if isinstance(value, str):
            value = value.encode(self.codepage)
        self._buffer[field.offset : field.offset + field.length] = self._fit(
            field, value or kind.pad.encode(self.codepage), kind
        )

    def _fit(self, field: FieldDescriptor, value: bytes, kind: FieldKind) -> bytes:
        if len(value) >= field.length:
            return value[: field.length]
        pad = self._pads[kind] * (field.length - len(value))
        if kind is FieldKind.NUMERIC:
            return pad + value
        return value + pad

    def get_string(self, name: str, *indices: int) -> str:
        return self.get_raw(name, *indices).decode(self.codepage)

    def set_string(self, name: str, value: str | None, *indices: int) -> None:
        self.set_raw(name, value, FieldKind.TEXT, *indices)

    def get_int(self, name: str, *indices: int) -> int:
        return self._get_integer(name, indices, INT_RANGE)

    def set_int(self, name: str, value: int, *indices: int) -> None:
        self.set_raw(name, str(value), FieldKind.NUMERIC, *indices)

    def get_long(self, name: str, *indices: int) -> int:
        return self._get_integer(name, indices, LONG_RANGE)

    def set_long(self, name: str, value: int, *indices: int) -> None:
        self.set_raw(name, str(value), FieldKind.NUMERIC, *indices)

    def _get_integer(self, name: str, indices: tuple[int, ...], bounds: tuple[int, int]) -> int:
        text = self.get_string(name, *indices)
        if INTEGER_RE.fullmatch(text) is None:
            raise InvalidNumericValueError(qualified_name(name, *indices), text)
        value = int(text)
        low, high = bounds
        if not low <= value <= high:
            raise InvalidNumericValueError(qualified_name(name, *indices), text)
        return value

    def get_decimal(self, name: str, scale: int, *indices: int) -> Decimal:
        """Read a number with ``scale`` implied decimal places."""
        return Decimal(self.get_long(name, *indices)).scaleb(-scale)

    def set_decimal(
        self, name: str, value: Decimal | float | int, scale: int, *indices: int
    ) -> None:
        """Store ``value`` with ``scale`` implied decimal places, truncating extra digits."""
        number = value if isinstance(value, Decimal) else Decimal(str(value))
        scaled = number.scaleb(scale).to_integral_value(rounding=ROUND_DOWN)
        self.set_long(name, int(scaled), *indices)

    def get_date(
        self, name: str, pattern: str | None, *indices: int, locale: str | None = None
    ) -> datetime:
        return parse_date(self.get_string(name, *indices), pattern, locale=locale)

    def set_date(
        self,
        name: str,
        value: date | None,
        pattern: str | None,
        *indices: int,
        locale: str | None = None,
    ) -> None:
        self.set_string(name, format_date(value, pattern, locale=locale), *indices)

    def to_dict(self, strip: bool = False) -> dict[str, str]:
        """Decoded text of every elementary field keyed by qualified name."""
        row: dict[str, str] = {}
        for field in self.layout.leaves():
            text = self._buffer[field.offset : field.offset + field.length].decode(self.codepage)
            row[field.qualified_name] = text.strip() if strip else text
        return row

    def __repr__(self) -> str:
        return f"Record({self.layout.root.name!r}, size={self.size})"
