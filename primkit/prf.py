"""Pseudorandom functions keyed by a seed."""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass

__all__ = ["PrfError", "Prf", "Blake2sPrf", "Blake2sWithParameterBlock"]


class PrfError(ValueError):
    """Raised when a seed, input or parameter has the wrong shape."""


class Prf(ABC):
    """A pseudorandom function from a seed and an input to an output."""

    @abstractmethod
    def evaluate(self, seed: bytes, data: bytes) -> bytes:
        """Evaluate the function on ``data`` under ``seed``."""


def _fixed(value: bytes, length: int, name: str) -> bytes:
    value = bytes(value)
    if len(value) != length:
        raise PrfError(f"{name} must be {length} bytes, got {len(value)}")
    return value


class Blake2sPrf(Prf):
    """BLAKE2s-256 over a 32-byte seed followed by a 32-byte input."""

    SEED_SIZE = 32
    INPUT_SIZE = 32
    OUTPUT_SIZE = 32

    def evaluate(self, seed: bytes, data: bytes) -> bytes:
        seed = _fixed(seed, self.SEED_SIZE, "seed")
        data = _fixed(data, self.INPUT_SIZE, "input")
        digest = hashlib.blake2s(digest_size=self.OUTPUT_SIZE)
        digest.update(seed)
        digest.update(data)
        return digest.digest()


@dataclass(frozen=True)
class Blake2sWithParameterBlock:
    """Unkeyed BLAKE2s-256 with a custom salt and personalization."""

    output_size: int = 32
    key_size: int = 0
    salt: bytes = bytes(8)
    personalization: bytes = bytes(8)

    def __post_init__(self) -> None:
        _fixed(self.salt, 8, "salt")
        _fixed(self.personalization, 8, "personalization")

    def evaluate(self, data: bytes) -> bytes:
        """A 32-byte BLAKE2s digest of ``data``."""
        return hashlib.blake2s(
            bytes(data),
            digest_size=32,
            salt=bytes(self.salt),
            person=bytes(self.personalization),
        ).digest()