"""GateBackend: the capability set the auction circuits consume.

Implementations are interchangeable and chosen at configuration time.
Every gate must run the same sequence of underlying operations whatever
the encrypted values are.
"""

from core.params import EncryptionParams

# Gate surface used by the circuits (decrypt is deliberately not part of it)
GATE_OPS = ("encrypt", "not_", "and_", "or_", "xor", "xnor", "mux")


class GateBackend:
    """Base class for boolean homomorphic backends."""

    def __init__(self, params: EncryptionParams):
        self.params = params

    def encrypt(self, bit) -> object:
        raise NotImplementedError

    def decrypt(self, ct) -> int:
        """Only the holder of the decryption capability may call this."""
        raise NotImplementedError

    def not_(self, a) -> object:
        raise NotImplementedError

    def and_(self, a, b) -> object:
        raise NotImplementedError

    def or_(self, a, b) -> object:
        raise NotImplementedError

    def xor(self, a, b) -> object:
        raise NotImplementedError

    def xnor(self, a, b) -> object:
        raise NotImplementedError

    def mux(self, sel, a, b) -> object:
        """a if sel decrypts to 1, else b."""
        raise NotImplementedError
