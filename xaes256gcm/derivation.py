"""
Key derivation
==============
The two derivation steps that turn AES-256-GCM into XAES-256-GCM
(C2SP XAES-256-GCM):

    K1 = double(AES-256(K, 0^128))                          once per key
    Kx = AES-256(K, M1 ^ K1) || AES-256(K, M2 ^ K1)         once per message

    M1 = 0x00 0x01 'X' 0x00 || N[:12]
    M2 = 0x00 0x02 'X' 0x00 || N[:12]

The block-cipher engine is a keyed AES-256-ECB encryptor context from
`cryptography`; it only ever sees the fixed-layout derivation blocks above.

Dependencies: cryptography >= 41.0
"""

import logging

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from .errors import InternalFaultError, InvalidArgumentError

logger = logging.getLogger(__name__)

BLOCK_SIZE          = 16
DERIVATION_NONCE    = 12   # first half of the 24-byte nonce
DERIVED_KEY_SIZE    = 32
REDUCTION_CONSTANT  = 0x87 # x^128 + x^7 + x^2 + x + 1

_M1_PREFIX = b"\x00\x01\x58\x00"
_M2_PREFIX = b"\x00\x02\x58\x00"


def new_engine(key: bytes):
    """Return a keyed AES-256-ECB encryptor context for `key`."""
    return Cipher(algorithms.AES(bytes(key)), modes.ECB()).encryptor()


def double(block: bytes) -> bytes:
    """Multiply a 128-bit big-endian field element by x in GF(2^128).

    Fixed-width shift with a masked (branch-free) conditional reduction.
    """
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"block must be {BLOCK_SIZE} bytes")
    out   = bytearray(BLOCK_SIZE)
    carry = 0
    for i in range(BLOCK_SIZE - 1, -1, -1):
        b      = block[i]
        out[i] = ((b << 1) & 0xFF) | carry
        carry  = b >> 7
    # carry is now the MSB of the input
    out[-1] ^= -carry & REDUCTION_CONSTANT
    return bytes(out)


def _transform(engine, data: bytes) -> bytes:
    out = engine.update(data)
    if len(out) != len(data):
        raise InternalFaultError(
            f"Block cipher returned {len(out)} bytes for a {len(data)}-byte input."
        )
    return out


def derive_subkey(engine) -> bytes:
    """Compute K1 by doubling the encryption of the all-zero block."""
    return double(_transform(engine, bytes(BLOCK_SIZE)))


def derive_key(engine, k1: bytes, derivation_nonce: bytes) -> bytes:
    """Compute the one-time 32-byte AES-256-GCM key for `derivation_nonce`."""
    if len(k1) != BLOCK_SIZE:
        raise InvalidArgumentError(f"k1 must be {BLOCK_SIZE} bytes")
    if len(derivation_nonce) != DERIVATION_NONCE:
        raise InvalidArgumentError(f"derivation nonce must be {DERIVATION_NONCE} bytes")

    m1m2 = bytearray(_M1_PREFIX + derivation_nonce + _M2_PREFIX + derivation_nonce)
    for i in range(DERIVED_KEY_SIZE):
        m1m2[i] ^= k1[i % BLOCK_SIZE]
    return _transform(engine, bytes(m1m2))
