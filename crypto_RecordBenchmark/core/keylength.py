# crypto_RecordBenchmark/core/keylength.py
from __future__ import annotations

_FIXED_BITS: dict[str, int] = {"DES": 56, "3DES": 168}
_AES_MAX_BITS = 256

def key_length_bits(key: str, algorithm: str) -> int:
    """
    Reported key strength for a trial.
    - DES / 3DES: nominal strength, independent of the key material
    - AES: bit length of the key, capped at 256
    - RC4 and anything else: bit length of the key
    """
    algo = (algorithm or "").upper()
    if algo in _FIXED_BITS:
        return _FIXED_BITS[algo]
    bits = len(key.encode("utf-8")) * 8
    if algo == "AES":
        return min(bits, _AES_MAX_BITS)
    return bits
