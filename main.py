"""Sealed-bid auction over encrypted bids: demo entry point.

Runs a few fixed scenarios on the simulated backend with every reducer
strategy and both schedulers, then prints the decrypted outcome.
"""

import logging
import sys

from backends import CountingBackend, SimulatedBackend
from circuits import AuctionCircuit, REDUCERS
from core import EncryptionParams, decrypt_int, decrypt_mask, encrypt_int
from engine import ParallelScheduler, SequentialScheduler


def run_auction(bids: list[int], k: int, seed: int | None = None,
                reducer: str = "fold", parallel: bool = False):
    """Encrypt bids, evaluate the circuit, decrypt and print the outcome."""
    backend = CountingBackend(SimulatedBackend(EncryptionParams(key_seed=seed)))
    scheduler = ParallelScheduler() if parallel else SequentialScheduler()

    circuit = AuctionCircuit.configure(
        len(bids), k, backend, reducer=REDUCERS[reducer], scheduler=scheduler)
    for b in bids:
        circuit.submit(encrypt_int(backend, b, k))
    circuit.mark_ready()

    backend.reset()
    backend.metrics.start()
    result = circuit.evaluate()
    backend.metrics.stop()

    # Decryption happens here, outside the circuit
    value = decrypt_int(backend, result.winning_value)
    mask = decrypt_mask(backend, result.ownership_mask)
    winner = mask.index(True)

    mode = "parallel" if parallel else "sequential"
    print(f"  [{reducer:6s} / {mode:10s}] winner: bidder {winner}, value {value}, "
          f"gates {backend.metrics.total_gates}, depth {circuit.stats['depth']}, "
          f"time {backend.metrics.elapsed:.3f}s")
    return winner, value


def main():
    logging.basicConfig(level=logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 42

    scenarios = [
        ("Distinct bids", [5, 20, 13, 7], 5),
        ("Tie for the maximum", [5, 9, 9], 4),
        ("Single bidder", [11], 4),
        ("Single-bit bids", [0, 1, 1, 0], 1),
        ("Edge bids", [0, 1, 30, 31], 5),
    ]
    for title, bids, k in scenarios:
        print("=" * 50)
        print(f"{title}: bids={bids}, k={k}")
        print("=" * 50)
        expected = bids.index(max(bids))
        print(f"  Expected: bidder {expected} wins with {max(bids)}")
        for name in REDUCERS:
            for parallel in (False, True):
                run_auction(bids, k, seed=seed, reducer=name, parallel=parallel)
        print()


if __name__ == "__main__":
    main()
