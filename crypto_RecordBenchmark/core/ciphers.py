# crypto_RecordBenchmark/core/ciphers.py
"""
Record encryption driver.

Keys are treated as passphrases, the same way the crypto-js defaults do:
key and IV are derived with OpenSSL's EVP_BytesToKey (MD5, one round) from the
passphrase and a fresh 8-byte salt, and the output is the OpenSSL envelope
``base64(b"Salted__" + salt + ciphertext)``.

    AES   AES-256, CBC, PKCS#7
    DES   DES,     CBC, PKCS#7
    3DES  DES-EDE3, CBC, PKCS#7
    RC4   ARC4 with a 256-bit derived key, no IV, no padding

Tokens are interchangeable with ``openssl enc -<cipher> -md md5 -a``.
"""
from __future__ import annotations
import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from Crypto.Cipher import AES, ARC4, DES, DES3
from Crypto.Hash import MD5
from Crypto.Random import get_random_bytes
from Crypto.Util.Padding import pad, unpad

from .errors import UnsupportedAlgorithmError
from .model import Record

_LOG = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS: tuple[str, ...] = ("AES", "DES", "3DES", "RC4")

_SALT_MAGIC = b"Salted__"
_SALT_LEN = 8

@dataclass(frozen=True)
class _CipherSpec:
    module: Any
    key_size: int             # bytes derived for the cipher key
    iv_size: int              # 0 for stream ciphers
    block_size: int | None    # None -> no padding

_CIPHERS: dict[str, _CipherSpec] = {
    "AES":  _CipherSpec(AES,  key_size=32, iv_size=16, block_size=AES.block_size),
    "DES":  _CipherSpec(DES,  key_size=8,  iv_size=8,  block_size=DES.block_size),
    "3DES": _CipherSpec(DES3, key_size=24, iv_size=8,  block_size=DES3.block_size),
    "RC4":  _CipherSpec(ARC4, key_size=32, iv_size=0,  block_size=None),
}

def _spec_for(algorithm: str) -> _CipherSpec:
    spec = _CIPHERS.get(algorithm)
    if spec is None:
        raise UnsupportedAlgorithmError(algorithm)
    return spec

def evp_bytes_to_key(passphrase: bytes, salt: bytes, key_len: int, iv_len: int) -> tuple[bytes, bytes]:
    """OpenSSL EVP_BytesToKey with MD5 and a single iteration."""
    derived = b""
    block = b""
    while len(derived) < key_len + iv_len:
        block = MD5.new(block + passphrase + salt).digest()
        derived += block
    return derived[:key_len], derived[key_len:key_len + iv_len]

def _new_cipher(spec: _CipherSpec, key: bytes, iv: bytes):
    if spec.block_size is None:
        return spec.module.new(key)
    return spec.module.new(key, spec.module.MODE_CBC, iv)

def serialize_record(record: Mapping[str, str]) -> str:
    """Compact JSON, keys in the record's own column order."""
    return json.dumps(record.as_dict() if isinstance(record, Record) else dict(record), ensure_ascii=False, separators=(",", ":"))

def encrypt_text(plaintext: str, key: str, algorithm: str) -> str:
    spec = _spec_for(algorithm)
    salt = get_random_bytes(_SALT_LEN)
    k, iv = evp_bytes_to_key(key.encode("utf-8"), salt, spec.key_size, spec.iv_size)
    data = plaintext.encode("utf-8")
    if spec.block_size is not None:
        data = pad(data, spec.block_size)
    ct = _new_cipher(spec, k, iv).encrypt(data)
    return base64.b64encode(_SALT_MAGIC + salt + ct).decode("ascii")

def decrypt_text(token: str, key: str, algorithm: str) -> str:
    spec = _spec_for(algorithm)
    raw = base64.b64decode(token)
    if not raw.startswith(_SALT_MAGIC) or len(raw) < len(_SALT_MAGIC) + _SALT_LEN:
        raise ValueError("ciphertext is not a salted OpenSSL envelope")
    salt = raw[len(_SALT_MAGIC):len(_SALT_MAGIC) + _SALT_LEN]
    ct = raw[len(_SALT_MAGIC) + _SALT_LEN:]
    k, iv = evp_bytes_to_key(key.encode("utf-8"), salt, spec.key_size, spec.iv_size)
    data = _new_cipher(spec, k, iv).decrypt(ct)
    if spec.block_size is not None:
        data = unpad(data, spec.block_size)
    return data.decode("utf-8")

def encrypt_record(record: Mapping[str, str], key: str, algorithm: str = "AES") -> str:
    return encrypt_text(serialize_record(record), key, algorithm)

def decrypt_record(token: str, key: str, algorithm: str = "AES") -> dict[str, str]:
    """Inverse of encrypt_record; used for verification, never timed."""
    return json.loads(decrypt_text(token, key, algorithm))

def check_algorithm(algorithm: str) -> None:
    """Raise UnsupportedAlgorithmError unless *algorithm* is one of SUPPORTED_ALGORITHMS."""
    _spec_for(algorithm)
    _LOG.debug("algorithm %s accepted", algorithm)
