"""Schedulers that evaluate a GateGraph on a backend.

The backend is shared read-only by all workers. Every node value is
written once, by the worker that computed it, and is dropped as soon as
its last consumer has run unless it is a requested output.
"""

import asyncio
import logging
import os
import time
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from core.errors import BackendError, ConfigurationError
from engine.graph import Gate, GateGraph, GateType, Wire

logger = logging.getLogger(__name__)


def apply_gate(backend, gate: Gate, values: list):
    """Evaluate one node; any backend failure surfaces as BackendError."""
    if gate.gate_type is GateType.INPUT:
        return gate.payload
    try:
        if gate.gate_type is GateType.CONST:
            return backend.encrypt(gate.payload)
        op = getattr(backend, gate.gate_type.value)
        return op(*[values[i] for i in gate.inputs])
    except BackendError:
        raise
    except Exception as exc:
        raise BackendError(f"{gate.gate_type.name} gate failed: {exc}") from exc


def _use_counts(graph: GateGraph) -> list[int]:
    return [len(d) for d in graph.dependents()]


def _release(values: list, remaining: list[int], keep: set[int], gate: Gate, idx: int):
    """Drop inputs whose last consumer just ran, and idx if nothing reads it."""
    for i in set(gate.inputs):
        remaining[i] -= 1
        if remaining[i] == 0 and i not in keep:
            values[i] = None
    if remaining[idx] == 0 and idx not in keep:
        values[idx] = None


def _live(values: list) -> set[int]:
    return {idx for idx, v in enumerate(values) if v is not None}


def in_running_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class SequentialScheduler:
    """Evaluate nodes one by one in insertion order.

    live holds the node indices whose values survived the last run.
    """

    needs_own_loop = False

    def __init__(self):
        self.live: set[int] = set()

    def run(self, graph: GateGraph, backend, outputs: Sequence[Wire]) -> list:
        keep = {w.index for w in outputs}
        remaining = _use_counts(graph)
        values: list = [None] * len(graph)

        for idx, gate in enumerate(graph.gates):
            values[idx] = apply_gate(backend, gate, values)
            _release(values, remaining, keep, gate, idx)

        self.live = _live(values)
        return [values[w.index] for w in outputs]

    async def run_async(self, graph: GateGraph, backend,
                        outputs: Sequence[Wire]) -> list:
        return self.run(graph, backend, outputs)


class ParallelScheduler:
    """Dispatch ready nodes to a bounded pool of worker threads.

    A node is ready once all of its inputs have been computed. At most
    `workers` gate evaluations are in flight at any time. From asyncio
    code await run_async(); run() owns its event loop.
    """

    needs_own_loop = True

    def __init__(self, workers: int | None = None):
        self.workers = workers if workers is not None else (os.cpu_count() or 1)
        if self.workers <= 0:
            raise ConfigurationError(f"workers must be > 0, got {self.workers}")
        self.live: set[int] = set()
        self.peak_in_flight = 0

    def run(self, graph: GateGraph, backend, outputs: Sequence[Wire]) -> list:
        if in_running_loop():
            raise ConfigurationError(
                "ParallelScheduler.run() called from a running event loop; "
                "await run_async() instead")
        return asyncio.run(self.run_async(graph, backend, outputs))

    async def run_async(self, graph: GateGraph, backend,
                        outputs: Sequence[Wire]) -> list:
        loop = asyncio.get_running_loop()
        keep = {w.index for w in outputs}
        dependents = graph.dependents()
        remaining = [len(d) for d in dependents]
        waiting = [len(set(g.inputs)) for g in graph.gates]
        values: list = [None] * len(graph)
        ready = deque(idx for idx, n in enumerate(waiting) if n == 0)
        in_flight: dict[asyncio.Future, int] = {}
        done_count = 0
        peak = 0
        start = time.time()

        def complete(idx: int, value):
            nonlocal done_count
            values[idx] = value
            done_count += 1
            for d in dependents[idx]:
                waiting[d] -= 1
                if waiting[d] == 0:
                    ready.append(d)
            _release(values, remaining, keep, graph.gates[idx], idx)

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            try:
                while done_count < len(graph):
                    while ready and len(in_flight) < self.workers:
                        idx = ready.popleft()
                        gate = graph.gates[idx]
                        if gate.gate_type is GateType.INPUT:
                            complete(idx, gate.payload)
                            continue
                        fut = loop.run_in_executor(
                            executor, apply_gate, backend, gate, values)
                        in_flight[fut] = idx
                    peak = max(peak, len(in_flight))
                    if not in_flight:
                        if not ready and done_count < len(graph):
                            raise ConfigurationError("gate graph is not topologically ordered")
                        continue
                    finished, _ = await asyncio.wait(
                        in_flight, return_when=asyncio.FIRST_COMPLETED)

                    # Retrieve every finished future before raising
                    errors = []
                    for fut in finished:
                        idx = in_flight.pop(fut)
                        exc = fut.exception()
                        if exc is None:
                            complete(idx, fut.result())
                        else:
                            errors.append(exc)
                    if errors:
                        raise errors[0]
            except BaseException:
                for fut in in_flight:
                    fut.cancel()
                raise
            finally:
                self.peak_in_flight = peak

        self.live = _live(values)
        logger.debug("evaluated %d nodes on %d workers (peak in flight %d) in %.3fs",
                     len(graph), self.workers, peak, time.time() - start)
        return [values[w.index] for w in outputs]
