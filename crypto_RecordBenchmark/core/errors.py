# crypto_RecordBenchmark/core/errors.py
from __future__ import annotations

class BenchmarkError(Exception):
    """Base class for every failure that aborts a benchmark run."""

class ConfigError(BenchmarkError):
    pass

class RecordLoadError(BenchmarkError):
    pass

class UnsupportedAlgorithmError(BenchmarkError, ValueError):
    def __init__(self, algorithm: str):
        super().__init__(f"Unsupported algorithm: {algorithm}")
        self.algorithm = algorithm

class ReportWriteError(BenchmarkError):
    pass
