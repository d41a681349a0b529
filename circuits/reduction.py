"""Reducers: fold n encrypted bids into the maximum and an ownership mask.

All strategies share one tie-break: the earliest bidder holding the
maximum owns it. They differ only in circuit shape (depth), never in
results, and none of them branches on encrypted data.
"""

import logging
from typing import Sequence

from core.encrypted import Bid, EncryptedInt
from core.errors import ConfigurationError
from circuits.comparison import ComparisonCircuit

logger = logging.getLogger(__name__)


class Reducer:
    """Base class. Subclasses implement _reduce on validated bids."""

    name = "base"

    def __init__(self, gates):
        self.gates = gates
        self.comparison = ComparisonCircuit(gates)

    def reduce(self, bids: Sequence[Bid]) -> tuple[EncryptedInt, list]:
        bids = list(bids)
        if not bids:
            raise ConfigurationError("cannot reduce an empty bid sequence")
        k = bids[0].value.width
        for pos, bid in enumerate(bids):
            if bid.bidder != pos:
                raise ConfigurationError(
                    f"bid at position {pos} belongs to bidder {bid.bidder}")
            if bid.value.width != k:
                raise ConfigurationError(
                    f"bidder {pos} has width {bid.value.width}, expected {k}")
        return self._reduce(bids)

    def _reduce(self, bids: list[Bid]) -> tuple[EncryptedInt, list]:
        raise NotImplementedError

    def select(self, sel, a: EncryptedInt, b: EncryptedInt) -> EncryptedInt:
        """Bitwise sel ? a : b."""
        g = self.gates
        return EncryptedInt(g.mux(sel, a.bit(p), b.bit(p)) for p in range(a.width))


class FoldReducer(Reducer):
    """Strict left-to-right fold. Depth O(n*k)."""

    name = "fold"

    def _reduce(self, bids):
        g = self.gates
        best = bids[0].value
        mask = [g.encrypt(1)]

        for bid in bids[1:]:
            # Strictly greater: on a tie the earlier bidder keeps its bit
            gt = self.comparison.greater(bid.value, best)
            best = self.select(gt, bid.value, best)
            not_gt = g.not_(gt)
            mask = [g.and_(m, not_gt) for m in mask]
            mask.append(gt)

        return best, mask


class TreeReducer(Reducer):
    """Balanced pairwise reduction. Depth O(log n * k).

    Pairs are always combined as (left, right) in bid order, so the
    result matches the fold exactly.
    """

    name = "tree"

    def combine(self, left, right):
        """combine((vL, mL), (vR, mR)); a mask of None is a single bidder."""
        g = self.gates
        l_value, l_mask = left
        r_value, r_mask = right

        gt = self.comparison.greater(r_value, l_value)
        value = self.select(gt, r_value, l_value)
        not_gt = g.not_(gt)

        mask = [not_gt] if l_mask is None else [g.and_(m, not_gt) for m in l_mask]
        mask += [gt] if r_mask is None else [g.and_(m, gt) for m in r_mask]
        return value, mask

    def _reduce(self, bids):
        level = [(bid.value, None) for bid in bids]
        rounds = 0

        while len(level) > 1:
            nxt = [self.combine(level[i], level[i + 1])
                   for i in range(0, len(level) - 1, 2)]
            if len(level) % 2:
                nxt.append(level[-1])
            level = nxt
            rounds += 1

        value, mask = level[0]
        if mask is None:
            mask = [self.gates.encrypt(1)]
        logger.debug("tree reduction over %d bids in %d rounds", len(bids), rounds)
        return value, mask


class ColumnReducer(Reducer):
    """Bit-column elimination across all bidders at once.

    Walks bit positions MSB to LSB keeping a candidate flag per bidder:
    if any candidate has a 1 at this position, candidates with a 0 drop
    out, and that OR is the winning value's bit. Tied maxima stay
    candidates, so a final priority pass keeps only the earliest one.
    """

    name = "column"

    def _or_all(self, bits: list):
        g = self.gates
        while len(bits) > 1:
            nxt = [g.or_(bits[i], bits[i + 1]) for i in range(0, len(bits) - 1, 2)]
            if len(bits) % 2:
                nxt.append(bits[-1])
            bits = nxt
        return bits[0]

    def _reduce(self, bids):
        g = self.gates
        n = len(bids)
        k = bids[0].value.width

        candidates = [g.encrypt(1) for _ in range(n)]
        winning = []
        for i in range(k):
            s = [g.and_(candidates[j], bids[j].value.bit(i)) for j in range(n)]
            b = self._or_all(s)
            candidates = [g.mux(b, s[j], candidates[j]) for j in range(n)]
            winning.append(b)

        mask = [candidates[0]]
        seen = candidates[0]
        for j in range(1, n):
            mask.append(g.and_(candidates[j], g.not_(seen)))
            if j < n - 1:
                seen = g.or_(seen, candidates[j])

        return EncryptedInt(winning, width=k), mask


REDUCERS = {cls.name: cls for cls in (FoldReducer, TreeReducer, ColumnReducer)}
