"""Interchangeable gate backends: interface, reference backend, instrumentation."""

from backends.base import GateBackend, GATE_OPS
from backends.simulated import SimulatedBackend, SimulatedCiphertext
from backends.instrumented import CountingBackend, GateMetrics
