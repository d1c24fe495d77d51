"""
XAES-256-GCM
============
AES-256-GCM with a 192-bit (24-byte) nonce.

Standard AES-256-GCM takes a 96-bit nonce; with random nonces the birthday
bound caps a key at roughly 2^32 messages. XAES-256-GCM folds the first 12
nonce bytes into a fresh one-time AES-256 key (see derivation.py) and hands
the last 12 bytes to ordinary AES-256-GCM as its nonce. Random 24-byte nonces
are then safe for practically unlimited messages per key.

Key size: 256 bits (32 bytes)
Nonce:    192 bits (24 bytes) — first 12 derive the key, last 12 go to GCM.
Tag:      128 bits (16 bytes) — appended to the ciphertext.

encrypt/decrypt output format: ciphertext || tag(16)
seal/open bundle format:       nonce(24) || ciphertext || tag(16)

Dependencies: cryptography >= 41.0
"""

import logging
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from . import errors
from .derivation import DERIVATION_NONCE, derive_key, derive_subkey, new_engine
from .errors import AuthenticationError, InvalidArgumentError, ReleasedStateError

logger = logging.getLogger(__name__)


class Xaes256GcmCipher:
    """XAES-256-GCM authenticated encryption with 24-byte nonces.

    An instance owns a keyed AES-256 engine and is not safe for unsynchronized
    use from several threads; build one per thread instead (construction is
    one key schedule plus one block encryption).
    """

    KEY_SIZE            = 32
    NONCE_SIZE          = 24
    TAG_SIZE            = 16
    OVERHEAD_ENCRYPTION = TAG_SIZE
    OVERHEAD            = OVERHEAD_ENCRYPTION + NONCE_SIZE
    MAX_PLAINTEXT_SIZE  = 2**31 - 1 - OVERHEAD
    MAX_AAD_SIZE        = 2**31 - 1

    def __init__(self, key: bytes):
        """
        Pass a 32-byte key. The key is handed to the AES engine and is not
        kept on the instance.
        """
        if key is None:
            raise InvalidArgumentError("key must not be None")
        if len(key) != self.KEY_SIZE:
            raise InvalidArgumentError(errors.INVALID_KEY_LENGTH)

        engine = new_engine(key)
        try:
            self._k1 = derive_subkey(engine)
        except Exception:
            engine.finalize()
            raise
        self._engine = engine
        logger.debug("XAES-256-GCM cipher ready")

    # ── lifecycle ───────────────────────────────────────────────────────────
    @property
    def released(self) -> bool:
        return self._engine is None

    def release(self) -> None:
        """Release the AES engine. Safe to call any number of times."""
        engine, self._engine = self._engine, None
        if engine is not None:
            engine.finalize()
            logger.debug("XAES-256-GCM cipher released")

    def __enter__(self) -> "Xaes256GcmCipher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @staticmethod
    def generate_key() -> bytes:
        return os.urandom(Xaes256GcmCipher.KEY_SIZE)

    @staticmethod
    def generate_nonce() -> bytes:
        return os.urandom(Xaes256GcmCipher.NONCE_SIZE)

    # ── allocating form ─────────────────────────────────────────────────────
    def encrypt(self, plaintext: bytes, nonce: bytes, aad: bytes = None) -> bytes:
        """
        Encrypt and authenticate.
        aad = Additional Authenticated Data (covered by the tag, not encrypted).
        Returns: ciphertext || tag, len(plaintext) + 16 bytes.
        """
        _require(plaintext=plaintext, nonce=nonce)
        self._check_plaintext(plaintext)
        self._check_nonce(nonce)
        self._check_aad(aad)
        self._check_ready()
        return self._encrypt(plaintext, nonce, aad)

    def decrypt(self, ciphertext: bytes, nonce: bytes, aad: bytes = None) -> bytes:
        """
        Verify and decrypt ciphertext || tag.
        Raises AuthenticationError if the tag does not verify.
        """
        _require(ciphertext=ciphertext, nonce=nonce)
        self._check_ciphertext(ciphertext)
        self._check_nonce(nonce)
        self._check_aad(aad)
        self._check_ready()
        return self._decrypt(ciphertext, nonce, aad)

    # ── caller-supplied buffer form ─────────────────────────────────────────
    def encrypt_into(self, plaintext: bytes, nonce: bytes, destination,
                     aad: bytes = None) -> int:
        """
        Encrypt into the writable buffer `destination`.
        Returns the number of bytes written (len(plaintext) + 16).
        """
        _require(plaintext=plaintext, nonce=nonce, destination=destination)
        self._check_plaintext(plaintext)
        self._check_nonce(nonce)
        self._check_aad(aad)
        size = len(plaintext) + self.OVERHEAD_ENCRYPTION
        out  = _check_destination(destination, size)
        self._check_ready()

        out[:size] = self._encrypt(plaintext, nonce, aad)
        return size

    def decrypt_into(self, ciphertext: bytes, nonce: bytes, destination,
                     aad: bytes = None) -> int:
        """
        Verify and decrypt into the writable buffer `destination`.
        Returns the number of bytes written (len(ciphertext) - 16).
        Nothing is written if authentication fails.
        """
        _require(ciphertext=ciphertext, nonce=nonce, destination=destination)
        self._check_ciphertext(ciphertext)
        self._check_nonce(nonce)
        self._check_aad(aad)
        size = len(ciphertext) - self.OVERHEAD_ENCRYPTION
        out  = _check_destination(destination, size)
        self._check_ready()

        out[:size] = self._decrypt(ciphertext, nonce, aad)
        return size

    # ── self-contained bundles ──────────────────────────────────────────────
    def seal(self, plaintext: bytes, aad: bytes = None) -> bytes:
        """
        Encrypt under a fresh random nonce.
        Returns: nonce(24) || ciphertext || tag(16)
        """
        nonce = self.generate_nonce()
        return nonce + self.encrypt(plaintext, nonce, aad)

    def open(self, bundle: bytes, aad: bytes = None) -> bytes:
        """
        Decrypt a bundle produced by seal().
        Raises AuthenticationError if tampered.
        """
        _require(bundle=bundle)
        if len(bundle) < self.OVERHEAD:
            raise InvalidArgumentError("Bundle too short.")
        return self.decrypt(bundle[self.NONCE_SIZE:], bundle[:self.NONCE_SIZE], aad)

    # ── internals ───────────────────────────────────────────────────────────
    def _gcm(self, nonce) -> AESGCM:
        return AESGCM(derive_key(self._engine, self._k1, bytes(nonce[:DERIVATION_NONCE])))

    def _encrypt(self, plaintext, nonce, aad) -> bytes:
        gcm = self._gcm(nonce)
        ct  = gcm.encrypt(bytes(nonce[DERIVATION_NONCE:]), bytes(plaintext), _aad(aad))
        logger.debug("encrypted %d bytes", len(plaintext))
        return ct

    def _decrypt(self, ciphertext, nonce, aad) -> bytes:
        gcm = self._gcm(nonce)
        try:
            pt = gcm.decrypt(bytes(nonce[DERIVATION_NONCE:]), bytes(ciphertext), _aad(aad))
        except InvalidTag:
            raise AuthenticationError() from None
        logger.debug("decrypted %d bytes", len(pt))
        return pt

    def _check_plaintext(self, plaintext) -> None:
        if len(plaintext) > self.MAX_PLAINTEXT_SIZE:
            raise InvalidArgumentError(errors.EXCEEDED_MAX_PLAINTEXT_SIZE)

    def _check_ciphertext(self, ciphertext) -> None:
        if len(ciphertext) < self.TAG_SIZE:
            raise InvalidArgumentError(errors.CIPHERTEXT_TOO_SMALL)

    def _check_nonce(self, nonce) -> None:
        if len(nonce) != self.NONCE_SIZE:
            raise InvalidArgumentError(errors.INVALID_NONCE_LENGTH)

    def _check_aad(self, aad) -> None:
        if aad is not None and len(aad) > self.MAX_AAD_SIZE:
            raise InvalidArgumentError(errors.EXCEEDED_MAX_AAD_SIZE)

    def _check_ready(self) -> None:
        if self._engine is None:
            raise ReleasedStateError()


def _require(**arguments) -> None:
    for name, value in arguments.items():
        if value is None:
            raise InvalidArgumentError(f"{name} must not be None")


def _check_destination(destination, size: int) -> memoryview:
    view = memoryview(destination)
    if not view.c_contiguous:
        raise InvalidArgumentError("The destination must be writable and contiguous.")
    out = view.cast("B")
    if out.readonly:
        raise InvalidArgumentError("The destination must be writable.")
    if len(out) < size:
        raise InvalidArgumentError(errors.DESTINATION_TOO_SMALL)
    return out


def _aad(aad):
    return bytes(aad) if aad else None
