# crypto_RecordBenchmark/core/matrix.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping

from .errors import ConfigError
from .model import TrialSpec

# ----- defaults (used when config.yaml has no matrix section) -----
_BATCH_SIZES: tuple[int, ...] = (3000, 6000, 9000, 12000, 15000, 18000, 21000, 25000, 30000)
_ALGORITHMS: tuple[str, ...] = ("AES", "DES", "3DES", "RC4")
_KEYS: dict[str, tuple[str, ...]] = {
    "AES":  ("1234567890123456", "12345678901234567890123456789012"),
    "DES":  ("12345678",),
    "3DES": ("123456789012345678901234",),
    "RC4":  ("1234567890123456", "12345678901234567890123456789012"),
}

@dataclass(frozen=True)
class TrialMatrix:
    batch_sizes: tuple[int, ...]
    algorithms: tuple[str, ...]
    keys: Mapping[str, tuple[str, ...]]

    def iter_trials(self) -> Iterator[TrialSpec]:
        """batch size (outer) -> algorithm -> key (inner), in configured order."""
        for size in self.batch_sizes:
            for algo in self.algorithms:
                for key in self.keys[algo]:
                    yield TrialSpec(batch_size=size, algorithm=algo, key=key)

    def __len__(self) -> int:
        return len(self.batch_sizes) * sum(len(self.keys[a]) for a in self.algorithms)

DEFAULT_MATRIX = TrialMatrix(_BATCH_SIZES, _ALGORITHMS, dict(_KEYS))

def _as_list(value, what: str) -> list:
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping)):
        return list(value)
    raise ConfigError(f"matrix.{what} must be a list, got {type(value).__name__}")

def matrix_from_config(cfg: dict | None) -> TrialMatrix:
    """
    Build the trial matrix from the ``matrix`` section of the config.
    Missing entries fall back to DEFAULT_MATRIX. Algorithm names are not
    checked here; an unknown one fails when its first trial runs.
    """
    m = (cfg or {}).get("matrix") or {}
    if not isinstance(m, Mapping):
        raise ConfigError("matrix section must be a mapping")

    sizes_raw = m.get("batch_sizes", DEFAULT_MATRIX.batch_sizes)
    sizes: list[int] = []
    for s in _as_list(sizes_raw, "batch_sizes"):
        try:
            n = int(s)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid batch size {s!r}") from e
        if n < 0:
            raise ConfigError(f"batch size must be >= 0, got {n}")
        sizes.append(n)

    algorithms = tuple(str(a) for a in _as_list(m.get("algorithms", DEFAULT_MATRIX.algorithms), "algorithms"))

    keys_cfg = m.get("keys") or {}
    if not isinstance(keys_cfg, Mapping):
        raise ConfigError("matrix.keys must map algorithm -> list of keys")
    keys: dict[str, tuple[str, ...]] = {}
    for algo in algorithms:
        raw = keys_cfg.get(algo, DEFAULT_MATRIX.keys.get(algo))
        if raw is None:
            raise ConfigError(f"no keys configured for algorithm {algo}")
        algo_keys = tuple(str(k) for k in _as_list(raw, f"keys.{algo}"))
        if not algo_keys:
            raise ConfigError(f"no keys configured for algorithm {algo}")
        keys[algo] = algo_keys

    return TrialMatrix(tuple(sizes), algorithms, keys)
