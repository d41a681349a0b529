"""Sealed-bid first-price auction circuit over encrypted bids.

Collects n encrypted k-bit bids, records the reduction circuit as a
gate graph and hands it to a scheduler. The only outputs are the
encrypted winning value and the encrypted one-hot ownership mask;
decryption belongs to whoever holds the key.
"""

import logging
import time
from enum import Enum
from typing import Iterable

from core.encrypted import AuctionResult, Bid, EncryptedInt
from core.errors import BackendError, ConfigurationError
from core.params import AuctionConfig
from engine.graph import CircuitBuilder
from engine.scheduler import SequentialScheduler, in_running_loop
from circuits.reduction import FoldReducer, Reducer

logger = logging.getLogger(__name__)


class AuctionState(Enum):
    COLLECTING = "collecting"
    READY = "ready"
    EVALUATING = "evaluating"
    COMPLETE = "complete"
    FAILED = "failed"


class AuctionCircuit:
    """One auction: Collecting -> Ready -> Evaluating -> Complete.

    Single use. After Complete (or a backend failure) build a new
    instance with fresh bids to run again.
    """

    def __init__(self, config: AuctionConfig,
                 reducer: type[Reducer] = FoldReducer,
                 scheduler=None):
        self.config = config.validate()
        self.reducer = reducer
        self.scheduler = scheduler or SequentialScheduler()

        self._state = AuctionState.COLLECTING
        self._bids: list[Bid] = []
        self._result: AuctionResult | None = None
        self.stats: dict[str, object] = {}

    @classmethod
    def configure(cls, n: int, k: int, backend, **kwargs) -> "AuctionCircuit":
        return cls(AuctionConfig(n, k, backend), **kwargs)

    @property
    def n(self) -> int:
        return self.config.n

    @property
    def k(self) -> int:
        return self.config.k

    @property
    def state(self) -> AuctionState:
        return self._state

    @property
    def bids(self) -> tuple[Bid, ...]:
        return tuple(self._bids)

    def submit(self, value: EncryptedInt | Iterable) -> Bid:
        """Accept the next bidder's encrypted bid; order is tie-break priority."""
        if self._state is not AuctionState.COLLECTING:
            raise ConfigurationError(f"cannot submit bids in state {self._state.value}")
        if len(self._bids) >= self.n:
            raise ConfigurationError(f"all {self.n} bids already submitted")
        if not isinstance(value, EncryptedInt):
            value = EncryptedInt(value, width=self.k)
        elif value.width != self.k:
            raise ConfigurationError(
                f"bid has {value.width} bits, auction expects {self.k}")

        bid = Bid(len(self._bids), value)
        self._bids.append(bid)
        logger.debug("accepted bid %d/%d", len(self._bids), self.n)
        return bid

    def mark_ready(self):
        """Close collection. Requires exactly n bids."""
        if self._state is not AuctionState.COLLECTING:
            raise ConfigurationError(f"cannot mark ready in state {self._state.value}")
        if len(self._bids) != self.n:
            raise ConfigurationError(
                f"expected {self.n} bids, have {len(self._bids)}")
        self._state = AuctionState.READY
        logger.info("auction ready: n=%d, k=%d", self.n, self.k)

    def evaluate(self) -> AuctionResult:
        """Run the reduction once. Raises before any gate runs if not Ready."""
        self._check_ready()
        if getattr(self.scheduler, "needs_own_loop", False) and in_running_loop():
            raise ConfigurationError(
                "evaluate() called from a running event loop; "
                "await evaluate_async() instead")
        graph, outputs, start = self._record()
        try:
            values = self.scheduler.run(graph, self.config.backend, outputs)
        except BaseException as exc:
            self._fail(exc)
            raise
        return self._finish(graph, outputs, values, start)

    async def evaluate_async(self) -> AuctionResult:
        """evaluate() for callers already inside an event loop."""
        self._check_ready()
        graph, outputs, start = self._record()
        try:
            values = await self.scheduler.run_async(
                graph, self.config.backend, outputs)
        except BaseException as exc:
            self._fail(exc)
            raise
        return self._finish(graph, outputs, values, start)

    def _check_ready(self):
        if self._state in (AuctionState.COMPLETE, AuctionState.FAILED,
                           AuctionState.EVALUATING):
            raise ConfigurationError(
                f"auction already evaluated ({self._state.value}); "
                "construct a new circuit with fresh bids")
        if self._state is not AuctionState.READY:
            raise ConfigurationError("auction is not ready; call mark_ready() first")

    def _record(self):
        """Record the reduction circuit over input wires."""
        self._state = AuctionState.EVALUATING
        start = time.time()
        try:
            builder = CircuitBuilder()
            wired = [
                Bid(bid.bidder, EncryptedInt((builder.input(ct) for ct in bid.value),
                                             width=self.k))
                for bid in self._bids
            ]
            best, mask = self.reducer(builder).reduce(wired)
        except BaseException as exc:
            self._fail(exc)
            raise
        return builder.graph, list(best) + list(mask), start

    def _fail(self, exc: BaseException):
        self._state = AuctionState.FAILED
        if isinstance(exc, BackendError):
            logger.warning("auction evaluation aborted by backend failure")

    def _finish(self, graph, outputs, values, start) -> AuctionResult:
        self._result = AuctionResult(
            EncryptedInt(values[:self.k], width=self.k), tuple(values[self.k:]))
        profile = graph.profile()
        self.stats = {
            "reducer": self.reducer.name,
            "gates": sum(profile.values()),
            "profile": dict(profile),
            "depth": graph.depth(outputs),
            "elapsed": time.time() - start,
        }
        # Inputs are consumed; only the result bundle is kept
        self._bids = []
        self._state = AuctionState.COMPLETE
        logger.info("auction complete: %s reducer, %d gates, depth %d, %.3fs",
                    self.stats["reducer"], self.stats["gates"],
                    self.stats["depth"], self.stats["elapsed"])
        return self._result

    @property
    def result(self) -> AuctionResult:
        if self._state is not AuctionState.COMPLETE:
            raise ConfigurationError(f"no result in state {self._state.value}")
        return self._result
