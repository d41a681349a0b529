"""Test utilities: backends, reference oracle, auction runner."""

from backends import CountingBackend, SimulatedBackend
from circuits import AuctionCircuit, FoldReducer
from core import EncryptionParams, decrypt_int, decrypt_mask, encrypt_int


def make_backend(seed=7):
    return SimulatedBackend(EncryptionParams(key_seed=seed))


def make_counting_backend(seed=7):
    return CountingBackend(make_backend(seed))


class FailingBackend(SimulatedBackend):
    """Simulated backend whose gates start failing after `budget` calls."""

    def __init__(self, budget: int, exc: Exception | None = None):
        super().__init__(EncryptionParams(key_seed=3))
        self.budget = budget
        self.exc = exc or MemoryError("bootstrapping key exhausted")
        self.calls = 0

    def _tick(self):
        self.calls += 1
        if self.calls > self.budget:
            raise self.exc

    def and_(self, a, b):
        self._tick()
        return super().and_(a, b)

    def or_(self, a, b):
        self._tick()
        return super().or_(a, b)


def reference_auction(bids):
    """Cleartext oracle: returns (winner_index, max_value). Earliest wins ties."""
    best = max(bids)
    return bids.index(best), best


def one_hot(n, index):
    return [i == index for i in range(n)]


def run_auction_test(bids, k, backend=None, reducer=FoldReducer, scheduler=None):
    """Run a full auction and return (value, mask, circuit)."""
    backend = backend or make_backend()
    circuit = AuctionCircuit.configure(len(bids), k, backend,
                                       reducer=reducer, scheduler=scheduler)
    for b in bids:
        circuit.submit(encrypt_int(backend, b, k))
    circuit.mark_ready()
    result = circuit.evaluate()
    value = decrypt_int(backend, result.winning_value)
    mask = decrypt_mask(backend, result.ownership_mask)
    return value, mask, circuit


def assert_correctness(bids, value, mask):
    """Winning value is max(bids); mask is one-hot at the earliest maximum."""
    winner, best = reference_auction(bids)
    assert value == best, f"got value {value}, expected {best}"
    assert sum(mask) == 1, f"mask {mask} is not one-hot"
    assert mask == one_hot(len(bids), winner), \
        f"mask {mask}, expected bidder {winner}"
