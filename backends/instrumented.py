"""Gate-counting wrapper around any backend."""

import threading
import time
from collections import Counter

from backends.base import GateBackend


class GateMetrics:
    """Track gate invocations, per-type counts and wall time."""

    def __init__(self):
        self.trace: list[str] = []
        self.by_type: Counter = Counter()
        self.start_time = None
        self.end_time = None

    def start(self):
        self.start_time = time.time()

    def stop(self):
        self.end_time = time.time()

    def record(self, op: str):
        self.trace.append(op)
        self.by_type[op] += 1

    @property
    def total_gates(self) -> int:
        """Gate evaluations, not counting encryptions of constants."""
        return sum(c for op, c in self.by_type.items() if op != "encrypt")

    @property
    def elapsed(self):
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time else time.time()
        return end - self.start_time


class CountingBackend(GateBackend):
    """Delegates to an inner backend and records every gate call.

    Decryptions are not recorded: they happen outside the circuit.
    """

    def __init__(self, inner: GateBackend):
        super().__init__(inner.params)
        self.inner = inner
        self.metrics = GateMetrics()
        self._lock = threading.Lock()

    def reset(self):
        with self._lock:
            self.metrics = GateMetrics()

    def _call(self, op: str, *args):
        with self._lock:
            self.metrics.record(op)
        return getattr(self.inner, op)(*args)

    def encrypt(self, bit):
        return self._call("encrypt", bit)

    def decrypt(self, ct):
        return self.inner.decrypt(ct)

    def not_(self, a):
        return self._call("not_", a)

    def and_(self, a, b):
        return self._call("and_", a, b)

    def or_(self, a, b):
        return self._call("or_", a, b)

    def xor(self, a, b):
        return self._call("xor", a, b)

    def xnor(self, a, b):
        return self._call("xnor", a, b)

    def mux(self, sel, a, b):
        return self._call("mux", sel, a, b)
