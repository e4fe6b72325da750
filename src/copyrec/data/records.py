"""Helpers for consuming datasets of fixed-length records and exporting decoded rows."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

import orjson
import pyarrow as pa

from copyrec.layout.builder import RecordLayout
from copyrec.record import DEFAULT_CODEPAGE, Record


def iter_fixed_records(data: bytes, record_size: int) -> Iterator[bytes]:
    """Yield consecutive ``record_size`` slices; a trailing partial record is skipped."""
    if record_size <= 0:
        raise ValueError(f"record_size must be positive, got {record_size}")
    idx = 0
    total = len(data)
    while idx + record_size <= total:
        yield data[idx : idx + record_size]
        idx += record_size


def load_records(path: Path, record_size: int) -> list[bytes]:
    return list(iter_fixed_records(path.read_bytes(), record_size))


def decode_records(
    data: bytes,
    layout: RecordLayout,
    codepage: str = DEFAULT_CODEPAGE,
    strip: bool = False,
    max_records: int | None = None,
) -> list[dict[str, str]]:
    """Decode every full record in ``data`` into a row of field texts."""
    record = Record(layout, codepage=codepage)
    rows: list[dict[str, str]] = []
    for idx, chunk in enumerate(iter_fixed_records(data, layout.size)):
        if max_records is not None and idx >= max_records:
            break
        record.replace_buffer(chunk)
        rows.append(record.to_dict(strip=strip))
    return rows


def rows_to_jsonl(rows: Iterable[dict[str, str]], path: Path) -> None:
    """Write decoded rows as JSONL for downstream consumption."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        for row in rows:
            f.write(orjson.dumps(row) + b"\n")


def rows_to_arrow(rows: list[dict[str, str]], layout: RecordLayout, path: Path) -> None:
    """Write decoded rows to Arrow IPC, one string column per elementary field."""
    path.parent.mkdir(parents=True, exist_ok=True)
    columns = [field.qualified_name for field in layout.leaves()]
    table = pa.table({name: pa.array([row[name] for row in rows], pa.string()) for name in columns})
    with pa.OSFile(str(path), "wb") as sink:
        with pa.ipc.new_file(sink, table.schema) as writer:
            writer.write_table(table)
