"""Reference backend: keyed one-time-pad bits, for tests and demos.

NOT secure. Gates open their inputs with the key, so it only stands in
for a real boolean FHE scheme while exercising the same gate surface.
"""

import hashlib
import logging
from dataclasses import dataclass, field

from core.rng import DeterministicRNG
from core.errors import BackendError
from core.params import EncryptionParams
from backends.base import GateBackend

logger = logging.getLogger(__name__)

NONCE_BYTES = 16
KEY_BYTES = 32


@dataclass(frozen=True)
class SimulatedCiphertext:
    """Opaque masked bit. body = bit XOR pad(key, nonce)."""
    key_id: bytes = field(repr=False)
    nonce: bytes = field(repr=False)
    body: int = field(repr=False)


class SimulatedBackend(GateBackend):
    """Boolean gates over pad-masked bits."""

    def __init__(self, params: EncryptionParams | None = None):
        super().__init__(params or EncryptionParams())
        key = DeterministicRNG(self.params.key_seed).randbytes(KEY_BYTES)
        self._key = key
        self._key_id = hashlib.blake2b(key, digest_size=8, person=b"key-id").digest()
        nonce_seed = None if self.params.key_seed is None else self.params.key_seed + 1
        self._nonce_rng = DeterministicRNG(nonce_seed)
        logger.debug("SimulatedBackend ready (scheme=%s, security=%d bits)",
                     self.params.scheme, self.params.security_bits)

    def _pad(self, nonce: bytes) -> int:
        return hashlib.blake2b(nonce, key=self._key, digest_size=1).digest()[0] & 1

    def _seal(self, bit: int) -> SimulatedCiphertext:
        nonce = self._nonce_rng.randbytes(NONCE_BYTES)
        return SimulatedCiphertext(self._key_id, nonce, (bit & 1) ^ self._pad(nonce))

    def _open(self, ct) -> int:
        if not isinstance(ct, SimulatedCiphertext):
            raise BackendError(f"not a ciphertext: {type(ct).__name__}")
        if ct.key_id != self._key_id:
            raise BackendError("ciphertext was produced under a different key")
        return ct.body ^ self._pad(ct.nonce)

    def encrypt(self, bit) -> SimulatedCiphertext:
        if bit not in (0, 1):
            raise BackendError(f"can only encrypt a single bit, got {bit!r}")
        return self._seal(int(bit))

    def decrypt(self, ct) -> int:
        return self._open(ct)

    def not_(self, a):
        return self._seal(1 ^ self._open(a))

    def and_(self, a, b):
        return self._seal(self._open(a) & self._open(b))

    def or_(self, a, b):
        return self._seal(self._open(a) | self._open(b))

    def xor(self, a, b):
        return self._seal(self._open(a) ^ self._open(b))

    def xnor(self, a, b):
        return self._seal(1 ^ self._open(a) ^ self._open(b))

    def mux(self, sel, a, b):
        s, x, y = self._open(sel), self._open(a), self._open(b)
        return self._seal((s & x) | ((1 ^ s) & y))
