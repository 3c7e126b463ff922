"""
Benchmark suite for the primality and factorization library.

Benchmarks:
1. Sieve generation: wheel vs plain layout, several segment sizes
2. Primality testing: 32-bit, 64-bit and Baillie-PSW paths, with and without cache
3. Pollard's rho on semiprimes of growing size
4. Complete decomposition across the dispatch ranges
5. Cache impact and a randomized stress test
"""

import time
import sys
import random
import statistics
from typing import List, Callable

import prime_sieve as sieve_module
from factorization import (
    clear_caches, factor, find_factor, prime_decomposition, reconstruct, seed
)
from primality import (
    is_prime, is_prime_32, is_prime_64, is_prime_baillie_psw, is_prime_naive
)
from prime_sieve import prime_sieve, prime_sieve_list


# ============================================================================
# BENCHMARK UTILITIES
# ============================================================================

class BenchmarkResult:
    """Timing statistics of one benchmark."""

    def __init__(self, name: str, times: List[float], operations: int = 1):
        self.name = name
        self.times = sorted(times)
        self.operations = operations

        self.min = min(times)
        self.max = max(times)
        self.mean = statistics.mean(times)
        self.median = statistics.median(times)
        self.stdev = statistics.stdev(times) if len(times) > 1 else 0

    @property
    def per_operation(self) -> float:
        return self.mean / self.operations

    def __str__(self):
        return (f"{self.name:40} | "
                f"Mean: {self.mean*1000:9.3f}ms | "
                f"Median: {self.median*1000:9.3f}ms | "
                f"StdDev: {self.stdev*1000:8.3f}ms | "
                f"Min: {self.min*1000:9.3f}ms | "
                f"Max: {self.max*1000:9.3f}ms")


def benchmark(func: Callable, *args, iterations: int = 5, **kwargs) -> BenchmarkResult:
    """
    Time repeated calls of func after one warm-up call.

    Args:
        func: Function to benchmark
        *args: Positional arguments to function
        iterations: Number of timed calls
        **kwargs: Keyword arguments to function

    Returns:
        BenchmarkResult with timing statistics
    """
    times = []

    func(*args, **kwargs)

    for _ in range(iterations):
        start = time.perf_counter()
        func(*args, **kwargs)
        times.append(time.perf_counter() - start)

    return BenchmarkResult(func.__name__, times)


def _section(title: str) -> None:
    print("\n" + "="*100)
    print(title)
    print("="*100)


# ============================================================================
# 1. SIEVE BENCHMARKS
# ============================================================================

def benchmark_sieve():
    """Wheel-compressed vs plain sieve, with and without the prime list."""
    _section("SIEVE BENCHMARKS")

    for n in (10**5, 10**6, 10**7):
        for wheel in (True, False):
            layout = "235 wheel" if wheel else "plain"
            result = benchmark(prime_sieve, n, wheel=wheel, iterations=3)
            result.name = f"prime_sieve({n:.0e}, {layout})"
            print(result)

            result = benchmark(prime_sieve_list, n, wheel=wheel, iterations=3)
            result.name = f"prime_sieve_list({n:.0e}, {layout})"
            print(result)

    print("\n[Segment size]")
    default = sieve_module.SEGMENT_SIZE
    try:
        for size in (1 << 12, 1 << 15, 1 << 18, 1 << 21):
            sieve_module.SEGMENT_SIZE = size
            result = benchmark(prime_sieve, 10**7, iterations=3)
            result.name = f"prime_sieve(1e7), segment {size} bytes"
            print(result)
    finally:
        sieve_module.SEGMENT_SIZE = default


# ============================================================================
# 2. PRIMALITY TESTING BENCHMARKS
# ============================================================================

def benchmark_primality():
    """Each dispatch path of is_prime, and the effect of memoization."""
    _section("PRIMALITY TESTING BENCHMARKS")

    paths = [
        (is_prime_32, 4294967291, "32-bit, hashed witness"),
        (is_prime_64, 18446744073709551557, "64-bit, seven witnesses"),
        (is_prime_baillie_psw, 18446744073709551557, "64-bit, Baillie-PSW"),
        (is_prime_baillie_psw, 2**127 - 1, "127-bit, Baillie-PSW"),
        (is_prime_baillie_psw, 2**521 - 1, "521-bit, Baillie-PSW"),
    ]
    for func, n, description in paths:
        result = benchmark(func, n, iterations=20)
        result.name = description
        print(result)

    print("\n[Batch of 10^5 consecutive values]")
    for start, description in ((10**6, "around 10^6"), (10**12, "around 10^12"),
                               (2**64, "around 2^64")):
        clear_caches()
        begin = time.perf_counter()
        count = sum(1 for n in range(start, start + 100000) if is_prime(n))
        elapsed = time.perf_counter() - begin
        result = BenchmarkResult(f"is_prime {description}", [elapsed], operations=100000)
        print(f"{result}  ({count} primes, {result.per_operation*1e6:.2f}us each)")

    print("\n[Cache]")
    prime = 952016363681739749
    clear_caches()
    start = time.perf_counter()
    is_prime(prime)
    fresh = time.perf_counter() - start

    times = []
    for _ in range(100):
        start = time.perf_counter()
        is_prime(prime)
        times.append(time.perf_counter() - start)
    result_cached = BenchmarkResult("is_prime (cached)", times)
    print(result_cached)
    print(f"  -> Cache speedup: {fresh / result_cached.mean:.1f}x")

    print("\n[Naive oracle]")
    result = benchmark(is_prime_naive, 1000000007, iterations=3)
    result.name = "is_prime_naive(10^9 + 7)"
    print(result)


# ============================================================================
# 3. POLLARD RHO BENCHMARKS
# ============================================================================

def benchmark_pollard_rho():
    """Pollard's rho (Floyd, batched gcd) on semiprimes."""
    _section("POLLARD RHO BENCHMARKS")

    test_cases = [
        (1073, "Small semiprime (29 * 37)"),
        (10403, "Medium semiprime (101 * 103)"),
        (1000003 * 1000033, "Semiprime ~10^12"),
        (1000000007 * 998244353, "Semiprime ~10^18"),
        ((2**31 - 1) * (2**61 - 1), "Semiprime ~2^92"),
    ]

    for n, description in test_cases:
        seed(0)
        result = benchmark(find_factor, n, iterations=3)
        result.name = description
        print(result)


# ============================================================================
# 4. COMPLETE DECOMPOSITION BENCHMARKS
# ============================================================================

def benchmark_decomposition():
    """prime_decomposition across the 32-bit, 64-bit and wide ranges."""
    _section("COMPLETE DECOMPOSITION BENCHMARKS")

    test_cases = [
        (360, "Small composite"),
        (2**32 - 1, "2^32 - 1 (trial division only)"),
        (65521 * 65537, "32-bit semiprime"),
        (1000003**3 * 1000033**2, "Repeated large primes"),
        (2**64 + 1, "2^64 + 1"),
        (2**67 - 1, "2^67 - 1"),
        (1000000007**3 * 1000000009 * 998244353**2, "Repeated primes ~2^180"),
    ]

    for n, description in test_cases:
        times = []
        for _ in range(3):
            clear_caches()
            seed(0)
            start = time.perf_counter()
            prime_decomposition(n)
            times.append(time.perf_counter() - start)
        print(BenchmarkResult(description, times))


# ============================================================================
# 5. CACHING IMPACT BENCHMARKS
# ============================================================================

def benchmark_caching_impact():
    """Cold vs warm decomposition cache."""
    _section("CACHING IMPACT BENCHMARKS")

    numbers = [1234567, 9876543, 2**64 + 1, 1000003 * 1000033, 10**18 + 9]

    clear_caches()
    times_cold = []
    for n in numbers:
        start = time.perf_counter()
        prime_decomposition(n)
        times_cold.append(time.perf_counter() - start)
    result_cold = BenchmarkResult("prime_decomposition (cold cache)", times_cold)
    print(result_cold)

    times_warm = []
    for n in numbers:
        start = time.perf_counter()
        prime_decomposition(n)
        times_warm.append(time.perf_counter() - start)
    result_warm = BenchmarkResult("prime_decomposition (warm cache)", times_warm)
    print(result_warm)

    print(f"Cache speedup: {result_cold.mean / result_warm.mean:.2f}x\n")


# ============================================================================
# 6. STRESS TEST
# ============================================================================

def benchmark_stress_test():
    """Decompose random products of two random primes and verify each result."""
    _section("STRESS TEST (50 Random Semiprimes)")

    rng = random.Random(2024)
    clear_caches()

    test_numbers = []
    while len(test_numbers) < 50:
        p = rng.randrange(10**6, 10**9)
        q = rng.randrange(10**6, 10**9)
        if is_prime(p) and is_prime(q):
            test_numbers.append(p * q)

    times = []
    successful = 0
    start_total = time.perf_counter()

    for n in test_numbers:
        start = time.perf_counter()
        factors = prime_decomposition(n)
        elapsed = time.perf_counter() - start
        if reconstruct(factors) == n and len(factor(n)) == 2:
            successful += 1
            times.append(elapsed)
        else:
            print(f"Wrong decomposition of {n}: {factors}")

    total_time = time.perf_counter() - start_total

    if times:
        print(BenchmarkResult("Stress test decompositions", times))
    print(f"Successful: {successful}/{len(test_numbers)}")
    print(f"Total time: {total_time:.3f}s")


# ============================================================================
# MAIN BENCHMARK SUITE
# ============================================================================

def run_all_benchmarks():
    """Run all benchmarks."""
    print("\n")
    print("╔" + "="*98 + "╗")
    print("║" + " "*22 + "PRIMALITY AND FACTORIZATION BENCHMARK SUITE" + " "*33 + "║")
    print("╚" + "="*98 + "╝")

    try:
        benchmark_sieve()
        benchmark_primality()
        benchmark_pollard_rho()
        benchmark_decomposition()
        benchmark_caching_impact()
        benchmark_stress_test()

        print("\n" + "="*100)
        print("BENCHMARK COMPLETE")
        print("="*100 + "\n")

    except KeyboardInterrupt:
        print("\nBenchmark interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    run_all_benchmarks()
