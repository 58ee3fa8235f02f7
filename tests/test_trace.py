from __future__ import annotations

import json

import pytest

from engine.errors import StepValidationError, TraceValidationError
from engine.steps import SolveStep, StepOp, ensure_step
from engine.trace import StepTrace, TraceEntry


def _sample_trace() -> StepTrace:
    trace = StepTrace()
    trace(SolveStep(StepOp.PLACE, 2, 4))
    trace(SolveStep(StepOp.PLACE, 3, 6))
    trace(SolveStep(StepOp.RETRACT, 3, 6))
    return trace


def test_recorded_entries_are_numbered_from_one() -> None:
    trace = _sample_trace()
    assert [entry.index for entry in trace.snapshot()] == [1, 2, 3]
    assert trace.counts() == {"steps": 3, "places": 2, "retracts": 1}


def test_json_payload_shape() -> None:
    payload = json.loads(_sample_trace().to_json())
    assert payload[0] == {"index": 1, "op": "PLACE", "cell": 2, "digit": 4}
    assert payload[2]["op"] == "RETRACT"


def test_trace_survives_json_round_trip() -> None:
    trace = _sample_trace()
    restored = StepTrace.from_json(trace.to_json(indent=2))
    assert restored.steps() == trace.steps()
    assert restored.digest() == trace.digest()


def test_append_rejects_non_increasing_indices() -> None:
    trace = StepTrace()
    trace.append({"index": 2, "op": "PLACE", "cell": 0, "digit": 1})
    with pytest.raises(TraceValidationError):
        trace.append({"index": 2, "op": "RETRACT", "cell": 0, "digit": 1})


def test_entry_index_must_be_positive() -> None:
    with pytest.raises(TraceValidationError):
        TraceEntry(index=0, step=SolveStep(StepOp.PLACE, 0, 1))


def test_digest_depends_on_order() -> None:
    trace = _sample_trace()
    other = StepTrace()
    for step in reversed(trace.steps()):
        other.record(step)
    assert trace.digest() != other.digest()


def test_reset_clears_entries() -> None:
    trace = _sample_trace()
    trace.reset()
    assert len(trace) == 0


@pytest.mark.parametrize(
    "payload",
    [
        {"op": "PLACE", "cell": 81, "digit": 1},
        {"op": "PLACE", "cell": 0, "digit": 0},
        {"op": "SWAP", "cell": 0, "digit": 1},
        {"op": "PLACE", "cell": 0},
    ],
)
def test_malformed_steps_are_rejected(payload: dict) -> None:
    with pytest.raises(StepValidationError):
        ensure_step(payload)


def test_step_op_accepts_plain_strings() -> None:
    step = SolveStep("RETRACT", 10, 3)  # type: ignore[arg-type]
    assert step.op is StepOp.RETRACT
    assert step.position == (1, 1)
    assert not step.is_place


def test_from_json_requires_an_array() -> None:
    with pytest.raises(TraceValidationError):
        StepTrace.from_json("{}")


def test_mappings_may_carry_enum_ops() -> None:
    step = ensure_step({"op": StepOp.PLACE, "cell": 4, "digit": 2})
    assert step == SolveStep(StepOp.PLACE, 4, 2)

    trace = StepTrace()
    trace.append({"index": 1, "op": StepOp.RETRACT, "cell": 4, "digit": 2})
    assert trace.steps()[0].op is StepOp.RETRACT
