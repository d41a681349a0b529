"""Encryption parameter set and auction configuration."""

from dataclasses import dataclass
from typing import Any

from core.errors import ConfigurationError


@dataclass(frozen=True)
class EncryptionParams:
    """Fixed parameter set shared by a backend and the circuits it serves.

    key_seed makes key generation reproducible; leave it None outside tests.
    """
    scheme: str = "simulated-boolean"
    security_bits: int = 128
    key_seed: int | None = None

    def __post_init__(self):
        if self.security_bits <= 0:
            raise ConfigurationError(
                f"security_bits must be positive, got {self.security_bits}")


@dataclass(frozen=True)
class AuctionConfig:
    """n bidders, k-bit bids, evaluated on one backend."""
    n: int
    k: int
    backend: Any

    def validate(self) -> "AuctionConfig":
        from backends.base import GATE_OPS

        if not isinstance(self.n, int) or self.n <= 0:
            raise ConfigurationError(f"bidder count n must be > 0, got {self.n!r}")
        if not isinstance(self.k, int) or self.k <= 0:
            raise ConfigurationError(f"bid width k must be > 0, got {self.k!r}")
        missing = [op for op in GATE_OPS if not callable(getattr(self.backend, op, None))]
        if missing:
            raise ConfigurationError(
                f"backend {type(self.backend).__name__} lacks gate operations: {missing}")
        return self
