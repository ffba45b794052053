#!/usr/bin/env python3
"""
TiwiFlix Snake Benchmark

Measures snake encoding, cell hashing and bag-of-cells serialization for
content sizes seen in collection metadata.
"""

import statistics
import time
from dataclasses import dataclass
from typing import Callable, List

from tiwiflix.content import snake
from tiwiflix.core.cells import Address, load_boc
from tiwiflix.network.batch import BatchDictionary


@dataclass
class BenchmarkResult:
    size: int
    encode_us: float
    decode_us: float
    boc_us: float
    cells: int


def timed(fn: Callable[[], object], runs: int) -> float:
    """Mean microseconds per call."""
    times = []
    for _ in range(runs):
        start = time.perf_counter()
        fn()
        times.append(time.perf_counter() - start)
    return statistics.mean(times) * 1e6


def benchmark_size(size: int, runs: int = 20) -> BenchmarkResult:
    data = bytes(i % 251 for i in range(size))
    cell = snake.encode(data)

    return BenchmarkResult(
        size=size,
        encode_us=timed(lambda: snake.encode(data), runs),
        decode_us=timed(lambda: snake.decode(cell), runs),
        boc_us=timed(lambda: load_boc(cell.to_boc(hash_crc32=True)), runs),
        cells=max(1, -(-size // 127)),
    )


def benchmark_batch(runs: int = 10) -> float:
    owners = [Address((0, (i + 1).to_bytes(32, "big"))) for i in range(80)]
    entries = BatchDictionary.for_recipients(owners, 0)
    return timed(lambda: BatchDictionary.build(entries), runs)


def main():
    print("=" * 60)
    print("TiwiFlix Snake Benchmark")
    print("=" * 60)

    import platform
    print(f"\nPlatform: {platform.platform()}")
    print(f"Python: {platform.python_version()}")

    print("\n" + "-" * 60)
    print("Snake encode / decode / BOC round-trip")
    print("-" * 60)

    # BOC ordering recurses once per chained cell
    sizes = [0, 127, 1_000, 10_000, 50_000]
    results: List[BenchmarkResult] = []
    for size in sizes:
        print(f"\nBenchmarking {size:,} bytes...", end=" ", flush=True)
        result = benchmark_size(size)
        results.append(result)
        print(f"{result.encode_us:.1f} us")

    print("\n" + "=" * 60)
    print("Results Summary")
    print("=" * 60)
    print(f"{'Bytes':<10} {'Cells':<8} {'encode us':<12} {'decode us':<12} {'boc us':<12}")
    print("-" * 60)
    for r in results:
        print(f"{r.size:<10,} {r.cells:<8} {r.encode_us:<12.1f} {r.decode_us:<12.1f} {r.boc_us:<12.1f}")

    print("\n" + "-" * 60)
    print("Batch dictionary (80 entries)")
    print("-" * 60)
    print(f"Build: {benchmark_batch():.1f} us")

    print("\n" + "=" * 60)
    print("Benchmark Complete")
    print("=" * 60)


if __name__ == "__main__":
    main()
