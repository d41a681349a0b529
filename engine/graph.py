"""Gate dependency graph and the builder that records circuits into it.

Circuit code calls gates on a CircuitBuilder exactly as it would on a
backend; the builder appends a Gate node per call and hands back a Wire.
Since the circuits never branch on secret data, one recording captures
the whole computation for any inputs of the same shape.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class GateType(Enum):
    """Node kinds. Values are the backend method names that evaluate them."""

    INPUT = "input"
    CONST = "encrypt"
    NOT = "not_"
    AND = "and_"
    OR = "or_"
    XOR = "xor"
    XNOR = "xnor"
    MUX = "mux"


ARITY = {
    GateType.INPUT: 0,
    GateType.CONST: 0,
    GateType.NOT: 1,
    GateType.AND: 2,
    GateType.OR: 2,
    GateType.XOR: 2,
    GateType.XNOR: 2,
    GateType.MUX: 3,
}


@dataclass(frozen=True)
class Wire:
    """Handle to the output of one node in a GateGraph."""
    index: int


@dataclass(frozen=True)
class Gate:
    """One node. payload is the external ciphertext (INPUT) or bit (CONST)."""
    gate_type: GateType
    inputs: tuple[int, ...] = ()
    payload: object = field(default=None, repr=False, compare=False)


class GateGraph:
    """Append-only list of gates; insertion order is a topological order."""

    def __init__(self):
        self.gates: list[Gate] = []

    def __len__(self) -> int:
        return len(self.gates)

    def add(self, gate: Gate) -> Wire:
        if len(gate.inputs) != ARITY[gate.gate_type]:
            raise ConfigurationError(
                f"{gate.gate_type.name} takes {ARITY[gate.gate_type]} inputs, "
                f"got {len(gate.inputs)}")
        self.gates.append(gate)
        return Wire(len(self.gates) - 1)

    def profile(self) -> Counter:
        """Count of nodes per backend operation (inputs excluded)."""
        return Counter(g.gate_type.value for g in self.gates
                       if g.gate_type is not GateType.INPUT)

    def dependents(self) -> list[list[int]]:
        """For each node, the distinct nodes that consume it."""
        deps: list[list[int]] = [[] for _ in self.gates]
        for idx, gate in enumerate(self.gates):
            for i in set(gate.inputs):
                deps[i].append(idx)
        return deps

    def levels(self) -> list[int]:
        """Gate depth of every node; inputs and constants sit at level 0."""
        level = [0] * len(self.gates)
        for idx, gate in enumerate(self.gates):
            if gate.inputs:
                level[idx] = 1 + max(level[i] for i in gate.inputs)
        return level

    def depth(self, outputs: Iterable[Wire] | None = None) -> int:
        """Critical path length, over all nodes or up to the given outputs."""
        level = self.levels()
        if outputs is None:
            return max(level, default=0)
        return max((level[w.index] for w in outputs), default=0)


class CircuitBuilder:
    """Gate surface that records into a GateGraph instead of evaluating."""

    def __init__(self, graph: GateGraph | None = None):
        self.graph = graph if graph is not None else GateGraph()

    def _wire(self, w) -> int:
        if not isinstance(w, Wire) or not 0 <= w.index < len(self.graph):
            raise ConfigurationError(f"not a wire of this circuit: {w!r}")
        return w.index

    def _gate(self, gate_type: GateType, *args) -> Wire:
        return self.graph.add(Gate(gate_type, tuple(self._wire(a) for a in args)))

    def input(self, ciphertext) -> Wire:
        """Register an externally supplied ciphertext bit."""
        return self.graph.add(Gate(GateType.INPUT, payload=ciphertext))

    def encrypt(self, bit) -> Wire:
        if bit not in (0, 1):
            raise ConfigurationError(f"constant must be a bit, got {bit!r}")
        return self.graph.add(Gate(GateType.CONST, payload=int(bit)))

    def not_(self, a) -> Wire:
        return self._gate(GateType.NOT, a)

    def and_(self, a, b) -> Wire:
        return self._gate(GateType.AND, a, b)

    def or_(self, a, b) -> Wire:
        return self._gate(GateType.OR, a, b)

    def xor(self, a, b) -> Wire:
        return self._gate(GateType.XOR, a, b)

    def xnor(self, a, b) -> Wire:
        return self._gate(GateType.XNOR, a, b)

    def mux(self, sel, a, b) -> Wire:
        return self._gate(GateType.MUX, sel, a, b)
