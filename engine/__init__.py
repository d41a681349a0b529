"""Gate dependency graph and schedulers that evaluate it."""

from engine.graph import GateType, Wire, Gate, GateGraph, CircuitBuilder
from engine.scheduler import (SequentialScheduler, ParallelScheduler, apply_gate,
                              in_running_loop)
