from __future__ import annotations

import argparse
import glob as stdlib_glob
import json
import os
import statistics
import tempfile
import time
import tracemalloc
from dataclasses import dataclass
from typing import Callable

import streamglob
from streamglob import MemoryBackend, PosixFlavour


@dataclass
class CaseResult:
    backend: str
    case: str
    first_ms_mean: float
    total_ms_mean: float
    total_ms_min: float
    total_ms_max: float
    peak_kib_mean: float


def _run_with_memory(fn: Callable[[], float]) -> tuple[float, float, float]:
    """Run *fn*, which returns its own time-to-first-match in seconds."""
    tracemalloc.start()
    start = time.perf_counter()
    first = fn()
    elapsed = time.perf_counter() - start
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()
    return first, elapsed, peak / 1024.0


def build_disk_tree(root: str, n_dirs: int, n_files: int) -> None:
    for d in range(n_dirs):
        sub = os.path.join(root, f"d{d:04d}")
        os.makedirs(sub, exist_ok=True)
        for f in range(n_files):
            with open(os.path.join(sub, f"f{f:04d}.txt"), "wb"):
                pass


def build_memory_tree(n_dirs: int, n_files: int) -> MemoryBackend:
    backend = MemoryBackend(flavour=PosixFlavour())
    for d in range(n_dirs):
        for f in range(n_files):
            backend.add_file(f"/bench/d{d:04d}/f{f:04d}.txt")
    return backend


def bench_stdlib_first(pattern: str) -> float:
    start = time.perf_counter()
    results = stdlib_glob.glob(pattern)
    if not results:
        raise RuntimeError("stdlib glob benchmark found nothing")
    # glob.glob only returns once everything has been listed.
    return time.perf_counter() - start


def bench_stdlib_iglob_first(pattern: str) -> float:
    start = time.perf_counter()
    it = stdlib_glob.iglob(pattern)
    if next(it, None) is None:
        raise RuntimeError("stdlib iglob benchmark found nothing")
    first = time.perf_counter() - start
    for _ in it:
        pass
    return first


def bench_streamglob_first(pattern: str, backend=None) -> float:
    start = time.perf_counter()
    with streamglob.stream(pattern, backend=backend) as s:
        if s.next_match() is None:
            raise RuntimeError("streamglob benchmark found nothing")
        first = time.perf_counter() - start
        for _ in s:
            pass
    return first


def bench_streamglob_first_only(pattern: str, backend=None) -> float:
    start = time.perf_counter()
    with streamglob.stream(pattern, backend=backend) as s:
        if s.next_match() is None:
            raise RuntimeError("streamglob benchmark found nothing")
        first = time.perf_counter() - start
    return first


def run_case(
    backend: str,
    case: str,
    fn: Callable[[], float],
    repeat: int,
    warmup: int,
) -> CaseResult:
    for _ in range(warmup):
        fn()

    first_list: list[float] = []
    elapsed_list: list[float] = []
    peak_list: list[float] = []
    for _ in range(repeat):
        first, elapsed, peak_kib = _run_with_memory(fn)
        first_list.append(first)
        elapsed_list.append(elapsed)
        peak_list.append(peak_kib)

    return CaseResult(
        backend=backend,
        case=case,
        first_ms_mean=statistics.mean(first_list) * 1000.0,
        total_ms_mean=statistics.mean(elapsed_list) * 1000.0,
        total_ms_min=min(elapsed_list) * 1000.0,
        total_ms_max=max(elapsed_list) * 1000.0,
        peak_kib_mean=statistics.mean(peak_list),
    )


def print_table(results: list[CaseResult]) -> None:
    print(
        "| Case | Backend | first(ms) | total mean(ms) | min(ms) | max(ms) | peak KiB (mean) |"
    )
    print("|---|---:|---:|---:|---:|---:|---:|")
    for r in results:
        print(
            f"| {r.case} | {r.backend} | {r.first_ms_mean:.3f} | {r.total_ms_mean:.3f} |"
            f" {r.total_ms_min:.3f} | {r.total_ms_max:.3f} | {r.peak_kib_mean:.1f} |"
        )


def _results_to_dict(results: list[CaseResult]) -> list[dict[str, float | str]]:
    return [
        {
            "backend": r.backend,
            "case": r.case,
            "first_ms_mean": r.first_ms_mean,
            "total_ms_mean": r.total_ms_mean,
            "total_ms_min": r.total_ms_min,
            "total_ms_max": r.total_ms_max,
            "peak_kib_mean": r.peak_kib_mean,
        }
        for r in results
    ]


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Time-to-first-match of streamglob vs stdlib glob"
    )
    parser.add_argument("--repeat", type=int, default=5)
    parser.add_argument("--warmup", type=int, default=1)
    parser.add_argument("--dirs", type=int, default=200)
    parser.add_argument("--files", type=int, default=50)
    parser.add_argument("--json", action="store_true")
    args = parser.parse_args()

    results: list[CaseResult] = []
    with tempfile.TemporaryDirectory() as td:
        build_disk_tree(td, args.dirs, args.files)
        pattern = os.path.join(td, "d*", "f*.txt")
        cases: list[tuple[str, Callable[[], float]]] = [
            ("glob.glob", lambda: bench_stdlib_first(pattern)),
            ("glob.iglob", lambda: bench_stdlib_iglob_first(pattern)),
            ("streamglob(drain)", lambda: bench_streamglob_first(pattern)),
            ("streamglob(first)", lambda: bench_streamglob_first_only(pattern)),
        ]
        for name, fn in cases:
            results.append(run_case(name, "disk_two_level", fn, args.repeat, args.warmup))

    memory = build_memory_tree(args.dirs, args.files)
    mem_pattern = "/bench/d*/f*.txt"
    results.append(
        run_case(
            "streamglob(MemoryBackend, drain)",
            "memory_two_level",
            lambda: bench_streamglob_first(mem_pattern, memory),
            args.repeat,
            args.warmup,
        )
    )
    results.append(
        run_case(
            "streamglob(MemoryBackend, first)",
            "memory_two_level",
            lambda: bench_streamglob_first_only(mem_pattern, memory),
            args.repeat,
            args.warmup,
        )
    )

    if args.json:
        print(json.dumps(_results_to_dict(results), indent=2))
    else:
        print_table(results)


if __name__ == "__main__":
    main()
