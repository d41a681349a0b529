"""Tests for the encrypted greater-than circuit."""

import itertools

import pytest

from circuits import ComparisonCircuit
from core import EncryptedInt, encrypt_int
from core.errors import ConfigurationError
from engine import CircuitBuilder, SequentialScheduler
from tests.utils import make_backend, make_counting_backend


def compare(backend, a, b, k):
    cmp = ComparisonCircuit(backend)
    out = cmp.greater(encrypt_int(backend, a, k), encrypt_int(backend, b, k))
    return backend.decrypt(out)


@pytest.mark.parametrize("a, b", [(0, 0), (0, 1), (1, 0), (1, 1)])
def test_single_bit(a, b):
    assert compare(make_backend(), a, b, 1) == int(a > b)


def test_exhaustive_three_bits():
    backend = make_backend()
    for a, b in itertools.product(range(8), repeat=2):
        assert compare(backend, a, b, 3) == int(a > b), f"{a} > {b}"


def test_comparison_20_gt_13():
    assert compare(make_backend(), 20, 13, 5) == 1


def test_comparison_5_not_gt_20():
    assert compare(make_backend(), 5, 20, 5) == 0


def test_comparison_equal_is_not_gt():
    assert compare(make_backend(), 15, 15, 5) == 0


def test_first_differing_bit_decides():
    # 0b1000 vs 0b0111: only the MSB favours a
    assert compare(make_backend(), 8, 7, 4) == 1
    assert compare(make_backend(), 7, 8, 4) == 0


def test_width_mismatch_rejected():
    backend = make_backend()
    with pytest.raises(ConfigurationError):
        ComparisonCircuit(backend).greater(
            encrypt_int(backend, 1, 3), encrypt_int(backend, 1, 4))


def test_gate_trace_independent_of_values():
    k = 6
    traces = set()
    for a, b in [(0, 0), (63, 0), (0, 63), (42, 42), (33, 31), (1, 2)]:
        backend = make_counting_backend()
        x, y = encrypt_int(backend, a, k), encrypt_int(backend, b, k)
        backend.reset()
        ComparisonCircuit(backend).greater(x, y)
        traces.add(tuple(backend.metrics.trace))
    assert len(traces) == 1


def test_gate_profile_matches_trace():
    k = 5
    backend = make_counting_backend()
    x, y = encrypt_int(backend, 19, k), encrypt_int(backend, 6, k)
    backend.reset()
    ComparisonCircuit(backend).greater(x, y)
    assert backend.metrics.by_type == ComparisonCircuit.gate_profile(k)
    assert backend.metrics.total_gates == 6 * k


def test_recorded_comparison_matches_eager():
    backend = make_backend()
    k = 4
    for a, b in [(9, 5), (5, 9), (7, 7)]:
        builder = CircuitBuilder()
        x = [builder.input(ct) for ct in encrypt_int(backend, a, k)]
        y = [builder.input(ct) for ct in encrypt_int(backend, b, k)]
        out = ComparisonCircuit(builder).greater(EncryptedInt(x), EncryptedInt(y))
        assert builder.graph.profile() == ComparisonCircuit.gate_profile(k)
        [ct] = SequentialScheduler().run(builder.graph, backend, [out])
        assert backend.decrypt(ct) == int(a > b)


def test_critical_path_grows_with_width():
    depths = []
    for k in (2, 4, 8):
        builder = CircuitBuilder()
        x = EncryptedInt(builder.input(None) for _ in range(k))
        y = EncryptedInt(builder.input(None) for _ in range(k))
        out = ComparisonCircuit(builder).greater(x, y)
        depths.append(builder.graph.depth([out]))
    assert depths[0] < depths[1] < depths[2]
