# crypto_RecordBenchmark/core/runner.py
from __future__ import annotations
import logging
import math
import time
from typing import Sequence

from .ciphers import check_algorithm, encrypt_record
from .keylength import key_length_bits
from .model import BenchmarkResult, Record

_LOG = logging.getLogger(__name__)

def measure_encryption(records: Sequence[Record], key: str, algorithm: str = "AES") -> BenchmarkResult:
    """
    Encrypt *records* one after the other and time the whole pass.

    The average per record is the raw quotient (no rounding). An empty batch
    reports NaN as its average.
    """
    check_algorithm(algorithm)  # fail before the clock starts

    start = time.perf_counter()
    encrypted = [encrypt_record(r, key, algorithm) for r in records]
    end = time.perf_counter()

    elapsed = end - start
    n = len(records)
    if n == 0:
        _LOG.warning("empty batch for %s; average time per record is undefined", algorithm)
        avg = math.nan
    else:
        avg = elapsed / n

    return BenchmarkResult(
        algorithm=algorithm,
        key_length=key_length_bits(key, algorithm),
        time_s=elapsed,
        avg_time_per_record_s=avg,
        n_records=n,
        encrypted_records=tuple(encrypted),
    )
