"""Encrypted integers, bids and the auction result bundle.

Ciphertext bits are opaque: nothing here looks inside them, only the
backend that produced them can.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from core.errors import ConfigurationError

Ciphertext = Any


class EncryptedInt:
    """Fixed-width unsigned integer as ciphertext bits, MSB first."""

    __slots__ = ("_bits",)

    def __init__(self, bits: Iterable[Ciphertext], width: int | None = None):
        bits = tuple(bits)
        if not bits:
            raise ConfigurationError("EncryptedInt needs at least one bit")
        if width is not None and len(bits) != width:
            raise ConfigurationError(
                f"expected {width} ciphertext bits, got {len(bits)}")
        self._bits = bits

    @property
    def width(self) -> int:
        return len(self._bits)

    def bit(self, index: int) -> Ciphertext:
        """Bit at position index; 0 is the most significant."""
        return self._bits[index]

    @property
    def bits(self) -> tuple[Ciphertext, ...]:
        return self._bits

    def __len__(self) -> int:
        return len(self._bits)

    def __getitem__(self, index):
        return self._bits[index]

    def __iter__(self):
        return iter(self._bits)

    def __repr__(self) -> str:
        return f"EncryptedInt(width={self.width})"


@dataclass(frozen=True)
class Bid:
    """A bidder's encrypted value. bidder is its submission index."""
    bidder: int
    value: EncryptedInt


@dataclass(frozen=True)
class AuctionResult:
    """Winning value and one-hot ownership mask, both still encrypted."""
    winning_value: EncryptedInt
    ownership_mask: tuple[Ciphertext, ...]

    @property
    def n(self) -> int:
        return len(self.ownership_mask)

    @property
    def k(self) -> int:
        return self.winning_value.width


# --- Plaintext helpers (client side, holder of the decryption capability) ---

def to_bits(value: int, k: int) -> list[int]:
    """Unsigned value as k bits, MSB first."""
    if value < 0 or value >= (1 << k):
        raise ConfigurationError(f"{value} is not representable in {k} unsigned bits")
    return [(value >> (k - 1 - i)) & 1 for i in range(k)]


def from_bits(bits: Sequence[int]) -> int:
    """Inverse of to_bits."""
    value = 0
    for b in bits:
        value = (value << 1) | (1 if b else 0)
    return value


def encrypt_int(backend, value: int, k: int) -> EncryptedInt:
    return EncryptedInt((backend.encrypt(b) for b in to_bits(value, k)), width=k)


def decrypt_int(backend, value: EncryptedInt) -> int:
    return from_bits([backend.decrypt(ct) for ct in value])


def decrypt_mask(backend, mask: Sequence[Ciphertext]) -> list[bool]:
    return [bool(backend.decrypt(ct)) for ct in mask]
