"""Core types: errors, parameters, encrypted integers, deterministic RNG."""

from core.errors import AuctionError, ConfigurationError, BackendError
from core.params import EncryptionParams, AuctionConfig
from core.encrypted import (
    EncryptedInt, Bid, AuctionResult,
    to_bits, from_bits, encrypt_int, decrypt_int, decrypt_mask,
)
from core.rng import DeterministicRNG
