"""Synthetic fixed-length dataset generator driven by a RecordLayout.

Every elementary field gets a value through the Record setters:
- PIC 9 fields: random digits that fit the field width
- PIC X fields: the first four characters of the field name plus the record number

This is used for fixtures, benchmarks, and CLI demos before real data arrives.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from copyrec.layout.builder import RecordLayout
from copyrec.layout.descriptor import FieldKind
from copyrec.record import DEFAULT_CODEPAGE, Record

# widest value a PIC 9 field can take while still fitting get_long
MAX_DIGITS = 18


@dataclass
class SynthConfig:
    codepage: str = DEFAULT_CODEPAGE
    seed: int = 1234


def synthesize_records(
    layout: RecordLayout,
    count: int = 8,
    config: SynthConfig | None = None,
) -> tuple[bytes, list[dict]]:
    """Generate ``count`` concatenated records plus per-record metadata."""
    cfg = config or SynthConfig()
    rng = random.Random(cfg.seed)
    record = Record(layout, codepage=cfg.codepage)
    records: list[bytes] = []
    meta: list[dict] = []

    for i in range(count):
        record.initialize()
        values: dict[str, object] = {}
        for field in layout.leaves():
            name = field.qualified_name
            if field.kind is FieldKind.NUMERIC:
                digits = min(field.length, MAX_DIGITS)
                number = rng.randint(0, 10**digits - 1)
                record.set_long(name, number)
                values[name] = number
            else:
                text = f"{field.name[:4]}{i:05d}"[: field.length]
                record.set_string(name, text)
                values[name] = text
        records.append(record.buffer)
        meta.append({"record_index": i, "fields": values})

    return b"".join(records), meta
