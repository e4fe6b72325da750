"""Micro-benchmarks for record decoding and field access on synthetic data."""

from __future__ import annotations

import time

from copyrec.data.generator import synthesize_records
from copyrec.data.records import decode_records, iter_fixed_records
from copyrec.layout.descriptor import FieldKind
from copyrec.layout.loader import LayoutSpec, build_layout, sample_layout
from copyrec.record import Record


def _best_of(runs: int, fn) -> float:
    timings = []
    for _ in range(runs):
        start = time.perf_counter()
        fn()
        timings.append(time.perf_counter() - start)
    return min(timings)


def benchmark_decode(records: int = 1000, runs: int = 3) -> dict[str, float]:
    layout = build_layout(LayoutSpec.from_mapping(sample_layout()).fields)
    data, _ = synthesize_records(layout, count=records)
    leaves = layout.leaves()

    def round_trip() -> None:
        # copy every leaf through its typed accessor pair
        record = Record(layout)
        for chunk in iter_fixed_records(data, layout.size):
            record.replace_buffer(chunk)
            for leaf in leaves:
                name = leaf.qualified_name
                if leaf.kind is FieldKind.NUMERIC:
                    record.set_long(name, record.get_long(name))
                else:
                    record.set_string(name, record.get_string(name))

    decode_s = _best_of(runs, lambda: decode_records(data, layout))
    access_s = _best_of(runs, round_trip)
    accesses = records * len(leaves) * 2
    return {
        "records": records,
        "bytes": len(data),
        "decode_seconds": decode_s,
        "decode_mbps": (len(data) / 1_000_000) / decode_s if decode_s else 0.0,
        "access_seconds": access_s,
        "accesses_per_second": accesses / access_s if access_s else 0.0,
    }


if __name__ == "__main__":
    result = benchmark_decode()
    print(result)
