"""
auth/hashing.py -- One-way password hashing with argon2id.

Security design decisions:
  Algorithm: argon2id via argon2-cffi's PasswordHasher. Argon2 is memory-hard,
      so GPU/ASIC brute force costs memory as well as time. Each hash() call
      draws a fresh 16-byte random salt, and the salt plus all cost parameters
      are embedded in the PHC-format digest ($argon2id$v=19$m=...,t=...,p=...).

  Verification: PasswordHasher.verify() re-derives the hash with the embedded
      parameters and compares in constant time. verify() here never raises --
      a mismatch, a corrupt digest, or a digest from another scheme all come
      back as False. The caller only needs a yes/no answer.

  Rehash: needs_rehash() reports digests made under different cost parameters
      so the login flow can upgrade them transparently after a successful
      verify.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

if TYPE_CHECKING:
    from core.config import Settings

logger = logging.getLogger("forumauth.auth")


class CredentialHasher:
    """Hash and verify secrets with argon2id.

    Usage:
        hasher = CredentialHasher()
        digest = hasher.hash("hunter22")
        hasher.verify(digest, "hunter22")   # True
        hasher.verify(digest, "hunter23")   # False
    """

    def __init__(self, time_cost: int = 3, memory_cost: int = 65536, parallelism: int = 4) -> None:
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> CredentialHasher:
        return cls(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
        )

    def hash(self, plaintext: str) -> str:
        """Return an argon2id PHC digest of plaintext with a fresh random salt.

        Raises UnicodeEncodeError if plaintext is not UTF-8 encodable (lone
        surrogates). validate_credentials() rejects such input before register
        gets here.
        """
        return self._hasher.hash(plaintext)

    def verify(self, digest: str, candidate: str) -> bool:
        """Return True if candidate matches digest. Returns False instead of raising."""
        if not isinstance(digest, str) or not digest:
            return False
        try:
            candidate.encode("utf-8")
        except UnicodeEncodeError:
            # No stored password can match a secret that cannot be encoded.
            return False
        try:
            return self._hasher.verify(digest, candidate)
        except VerifyMismatchError:
            return False
        except (VerificationError, InvalidHashError, UnicodeError):
            logger.warning("Stored password digest could not be parsed; treating as mismatch")
            return False

    def needs_rehash(self, digest: str) -> bool:
        """Return True if digest was not produced with this hasher's current parameters."""
        try:
            return self._hasher.check_needs_rehash(digest)
        except (InvalidHashError, UnicodeError):
            return True
