"""Step trace recording for solve runs."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, MutableSequence, Tuple

from .errors import TraceValidationError
from .steps import SolveStep, StepLike, StepOp, ensure_step


@dataclass(frozen=True, slots=True)
class TraceEntry:
    """Single recorded step with its 1-based position in the run."""

    index: int
    step: SolveStep

    def __post_init__(self) -> None:
        if self.index < 1:
            raise TraceValidationError("index must be >= 1")

    def to_payload(self) -> dict:
        return {"index": int(self.index), **self.step.to_payload()}


@dataclass
class StepTrace:
    """Mutable trace accumulator.

    Instances are callable so they can be handed to the solver directly as a
    step sink.
    """

    entries: MutableSequence[TraceEntry] = field(default_factory=list)

    def __call__(self, step: SolveStep) -> None:
        self.record(step)

    def __len__(self) -> int:
        return len(self.entries)

    def record(self, step: StepLike) -> TraceEntry:
        entry = TraceEntry(index=len(self.entries) + 1, step=ensure_step(step))
        self.entries.append(entry)
        return entry

    def append(self, entry: TraceEntry | Mapping[str, object]) -> None:
        if isinstance(entry, Mapping):
            payload = dict(entry)
            try:
                index = int(payload.pop("index"))  # type: ignore[arg-type]
            except KeyError as exc:
                raise TraceValidationError("trace entry is missing 'index'") from exc
            entry = TraceEntry(index=index, step=ensure_step(payload))
        if self.entries and entry.index <= self.entries[-1].index:
            raise TraceValidationError("trace indices must be strictly increasing")
        self.entries.append(entry)

    def extend(self, entries: Iterable[TraceEntry | Mapping[str, object]]) -> None:
        for entry in entries:
            self.append(entry)

    def steps(self) -> Tuple[SolveStep, ...]:
        return tuple(entry.step for entry in self.entries)

    def counts(self) -> dict:
        places = sum(1 for entry in self.entries if entry.step.op is StepOp.PLACE)
        return {"steps": len(self.entries), "places": places, "retracts": len(self.entries) - places}

    def reset(self) -> None:
        self.entries.clear()

    def snapshot(self) -> List[TraceEntry]:
        return list(self.entries)

    def to_json(self, *, indent: int | None = None) -> str:
        payload = [entry.to_payload() for entry in self.entries]
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "StepTrace":
        data = json.loads(text)
        if not isinstance(data, list):
            raise TraceValidationError("trace payload must be a JSON array")
        trace = cls()
        trace.extend(data)
        return trace

    def digest(self) -> str:
        """Return the sha256 hex digest of the compact JSON payload."""

        return hashlib.sha256(self.to_json().encode("utf-8")).hexdigest()


__all__ = ["StepTrace", "TraceEntry"]
