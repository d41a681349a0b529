"""Comparison circuit: greater-than on encrypted bit vectors."""

from collections import Counter

from core.encrypted import EncryptedInt
from core.errors import ConfigurationError


class ComparisonCircuit:
    """Compare two encrypted integers with boolean gates only.

    `gates` is anything exposing the gate surface: a backend for eager
    evaluation, or a CircuitBuilder to record the circuit.
    """

    def __init__(self, gates):
        self.gates = gates

    def greater(self, a: EncryptedInt, b: EncryptedInt):
        """Compute [a > b] given encrypted bits (MSB-first).

        Prefix scan from MSB to LSB:
        - At each bit i, [gt_i] = a_i AND NOT b_i
        - [win_i] = gt_i AND eq_prefix fires at the first differing bit
        - eq_prefix tracks "all higher bits were equal"
        Every gate runs for every position, whatever the bits are.
        """
        k = a.width
        if b.width != k:
            raise ConfigurationError(f"width mismatch: {k} vs {b.width}")
        g = self.gates

        eq_prefix = g.encrypt(1)
        result = g.encrypt(0)

        for i in range(k):
            a_i = a.bit(i)
            b_i = b.bit(i)

            gt_i = g.and_(a_i, g.not_(b_i))
            win_i = g.and_(gt_i, eq_prefix)
            result = g.or_(result, win_i)

            # Must follow win_i for this position
            eq_prefix = g.and_(eq_prefix, g.xnor(a_i, b_i))

        return result

    @staticmethod
    def gate_profile(k: int) -> Counter:
        """Exact gate calls made by greater() for width k."""
        return Counter({"encrypt": 2, "not_": k, "and_": 3 * k,
                        "or_": k, "xnor": k})
