"""
xaes256gcm — XAES-256-GCM authenticated encryption
===================================================
AES-256-GCM extended to 192-bit (24-byte) nonces, per C2SP XAES-256-GCM.
Random nonces are safe at any practical message count per key.

    from xaes256gcm import Xaes256GcmCipher

    with Xaes256GcmCipher(key) as xaes:
        ct = xaes.encrypt(plaintext, nonce, aad)
        pt = xaes.decrypt(ct, nonce, aad)

License: Apache 2.0
"""

import logging

__version__  = "1.0.0"

from .cipher     import Xaes256GcmCipher
from .derivation import derive_key, derive_subkey
from .errors     import (
    AuthenticationError,
    InternalFaultError,
    InvalidArgumentError,
    ReleasedStateError,
    XaesError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Xaes256GcmCipher",
    "derive_key",
    "derive_subkey",
    "XaesError",
    "InvalidArgumentError",
    "ReleasedStateError",
    "AuthenticationError",
    "InternalFaultError",
]
