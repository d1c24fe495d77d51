"""
Error taxonomy
==============
Every failure surfaced by the cipher is one of the classes below, so callers
can branch on cause. Decrypt authentication failures are deliberately a
single class with a single message.
"""


class XaesError(Exception):
    """Base class for all XAES-256-GCM errors."""


class InvalidArgumentError(XaesError, ValueError):
    """Missing argument, or a key / nonce / plaintext / ciphertext /
    destination of the wrong size."""


class ReleasedStateError(XaesError, RuntimeError):
    """The cipher was released and can no longer be used."""

    def __init__(self, message: str = "The cipher has been released."):
        super().__init__(message)


class AuthenticationError(XaesError):
    """Tag verification failed."""

    def __init__(self, message: str = "Authentication failed."):
        super().__init__(message)


class InternalFaultError(XaesError, RuntimeError):
    """The block-cipher backend returned an unexpected amount of data."""


# ── message texts ────────────────────────────────────────────────────────────
INVALID_KEY_LENGTH          = "Key must be exactly 32 bytes in size."
INVALID_NONCE_LENGTH        = "Nonce must be exactly 24 bytes in size."
EXCEEDED_MAX_PLAINTEXT_SIZE = "The plaintext size exceeds the maximum limit"
EXCEEDED_MAX_AAD_SIZE       = "The additional data size exceeds the maximum limit"
CIPHERTEXT_TOO_SMALL        = "The ciphertext is too small."
DESTINATION_TOO_SMALL       = "The destination is too small."
