"""
Benchmarks for ogclaim core components.

Run with: python -m ogclaim.utils.benchmark
or:       ogclaim bench --leaves 4096
"""

import statistics
import time
from dataclasses import dataclass, field
from typing import Callable, List

from ogclaim.crypto import keccak256
from ogclaim.core.generator import generate
from ogclaim.core.merkle import (
    MerkleTree,
    OwnershipRecord,
    encode_leaf,
    encode_leaf_packed,
    hash_pair,
    verify_proof,
)
from ogclaim.core.snapshot import Snapshot
from ogclaim.utils.logger import get_logger

logger = get_logger("benchmark")


# =============================================================================
# Benchmark Framework
# =============================================================================


@dataclass
class BenchmarkResult:
    """Timings of one benchmark, in milliseconds per call."""
    name: str
    samples_ms: List[float] = field(default_factory=list)

    @property
    def iterations(self) -> int:
        return len(self.samples_ms)

    @property
    def total_time_ms(self) -> float:
        return sum(self.samples_ms)

    @property
    def avg_time_ms(self) -> float:
        return statistics.mean(self.samples_ms)

    @property
    def median_time_ms(self) -> float:
        return statistics.median(self.samples_ms)

    @property
    def min_time_ms(self) -> float:
        return min(self.samples_ms)

    @property
    def max_time_ms(self) -> float:
        return max(self.samples_ms)

    @property
    def ops_per_sec(self) -> float:
        # Sub-resolution timings read as 0
        avg = self.avg_time_ms
        return 1000 / avg if avg > 0 else float("inf")

    def __str__(self) -> str:
        return (
            f"{self.name}: {self.ops_per_sec:.0f} ops/s "
            f"(median={self.median_time_ms:.3f}ms, min={self.min_time_ms:.3f}ms, max={self.max_time_ms:.3f}ms)"
        )


def benchmark(name: str, func: Callable, iterations: int = 1000, warmup: int = 100) -> BenchmarkResult:
    """
    Time a no-argument callable.

    Args:
        name: Label for the report
        func: Work to time
        iterations: Timed calls
        warmup: Untimed calls first
    """
    for _ in range(warmup):
        func()

    result = BenchmarkResult(name=name)
    for _ in range(iterations):
        start = time.perf_counter_ns()
        func()
        result.samples_ms.append((time.perf_counter_ns() - start) / 1e6)

    logger.debug(f"benchmark {name}: {result.iterations} iterations, {result.total_time_ms:.1f}ms total")
    return result


def synthetic_snapshot(count: int) -> Snapshot:
    """Token IDs 1..count with distinct owners derived from the token ID."""
    return Snapshot(
        OwnershipRecord(token_id=i, owner=keccak256(i.to_bytes(32, "big"))[-20:])
        for i in range(1, count + 1)
    )


# =============================================================================
# Leaf / Node Hashing
# =============================================================================


def benchmark_hashing(scale: int = 1) -> List[BenchmarkResult]:
    """Leaf encodings and the node pairing rule."""
    owner = bytes(range(20))
    a, b = keccak256(b"a"), keccak256(b"b")
    n = 10000 * scale

    return [
        benchmark("Leaf Encode (abi, 64 bytes)", lambda: encode_leaf(12345, owner), iterations=n),
        benchmark("Leaf Encode (packed, 52 bytes)", lambda: encode_leaf_packed(12345, owner), iterations=n),
        benchmark("Sorted Pair Hash", lambda: hash_pair(a, b), iterations=n),
    ]


# =============================================================================
# Tree / Proofs
# =============================================================================


def benchmark_merkle(leaf_count: int = 1024, scale: int = 1) -> List[BenchmarkResult]:
    """Build, prove and verify over a synthetic snapshot."""
    snapshot = synthetic_snapshot(leaf_count)
    leaves = snapshot.leaves()
    tree = MerkleTree.build(leaves)
    target = leaves[leaf_count // 2]
    proof = tree.prove(target)
    root = tree.root

    return [
        benchmark(f"Merkle Build ({leaf_count} leaves)", lambda: MerkleTree.build(leaves), iterations=10 * scale, warmup=1),
        benchmark(f"Generate + Self-check ({leaf_count} proofs)", lambda: generate(snapshot), iterations=2 * scale, warmup=0),
        benchmark("Merkle Proof Generation", lambda: tree.prove(target), iterations=1000 * scale),
        benchmark("Merkle Proof Verification", lambda: verify_proof(target, proof, root), iterations=1000 * scale),
    ]


# =============================================================================
# Main
# =============================================================================


def run_all_benchmarks(leaf_count: int = 1024, scale: int = 1) -> List[BenchmarkResult]:
    """Run every section, print the report and return the results."""
    print("=" * 60)
    print("ogclaim Performance Benchmarks")
    print("=" * 60)

    collected = []
    for section_name, run in (
        ("Hashing", lambda: benchmark_hashing(scale)),
        (f"Merkle Trees ({leaf_count} leaves)", lambda: benchmark_merkle(leaf_count, scale)),
    ):
        print(f"\n{section_name}")
        print("-" * 40)
        for r in run():
            print(f"  {r}")
            collected.append(r)

    print("\n" + "=" * 60)
    return collected


if __name__ == "__main__":
    run_all_benchmarks()
