# crypto_RecordBenchmark/core/model.py
from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Iterator

@dataclass(frozen=True)
class Record(Mapping):
    """One input row: column name -> cell string, in header order."""
    fields: tuple[tuple[str, str], ...]

    @classmethod
    def from_pairs(cls, pairs) -> "Record":
        return cls(tuple((str(k), str(v)) for k, v in pairs))

    def __getitem__(self, key: str) -> str:
        for k, v in self.fields:
            if k == key:
                return v
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return (k for k, _ in self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def as_dict(self) -> dict[str, str]:
        return dict(self.fields)

@dataclass(frozen=True)
class TrialSpec:
    batch_size: int           # number of leading records to encrypt
    algorithm: str            # AES | DES | 3DES | RC4
    key: str                  # passphrase handed to the cipher

@dataclass(frozen=True)
class BenchmarkResult:
    algorithm: str
    key_length: int           # bits, see core.keylength
    time_s: float             # wall clock for the whole batch
    avg_time_per_record_s: float
    n_records: int            # records actually encrypted
    encrypted_records: tuple[str, ...] = field(default=(), repr=False)

    def without_ciphertexts(self) -> "BenchmarkResult":
        return replace(self, encrypted_records=())

@dataclass(frozen=True)
class ReportRow:
    algorithm: str
    key_length: int
    records: int
    encryption_time_s: float  # rounded to 2 decimals
