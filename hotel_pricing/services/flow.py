"""
Step pipeline state machine for pricing runs.

A FlowController runs named steps in a fixed order over a shared context dict:

- Sequential: steps run in registration order; the first failure stops the run.
- Conditional: `branch()` builds a step that dispatches to one named handler.
- Loop: `bounded_loop()` builds a step that repeats a body while a predicate
  holds, with a hard iteration limit so it always terminates.
- Error continuation: `on_error` runs exactly once, on the first failure, and
  no later step executes.

States move INIT -> RUNNING -> DONE, or RUNNING -> ERROR on failure. ERROR
and DONE are terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable, Mapping, Optional, Union

import structlog

from hotel_pricing.config import FLOW_LOOP_LIMIT
from hotel_pricing.errors import FlowStateError, HotelPricingError
from hotel_pricing.metrics import flow_transitions

logger = structlog.get_logger(__name__)


class FlowState(str, Enum):
    INIT = "INIT"
    RUNNING = "RUNNING"
    ERROR = "ERROR"
    DONE = "DONE"


@dataclass(frozen=True)
class StepResult:
    """Outcome of a step. `value` is stored in controller.results on success."""

    ok: bool
    detail: Optional[str] = None
    value: Any = None

    @classmethod
    def success(cls, value: Any = None, detail: Optional[str] = None) -> "StepResult":
        return cls(ok=True, detail=detail, value=value)

    @classmethod
    def failure(cls, detail: str) -> "StepResult":
        return cls(ok=False, detail=detail)


@dataclass(frozen=True)
class StepFailure:
    """The first failure of a run, handed to the error continuation."""

    step: str
    detail: str
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class FlowEvent:
    kind: str
    step: Optional[str] = None
    state: Optional[FlowState] = None
    detail: Optional[str] = None
    iteration: Optional[int] = None


Context = dict[str, Any]
StepReturn = Union[StepResult, bool, None]
StepFn = Callable[[Context], StepReturn]
LoopBody = Callable[[int, Context], StepReturn]
ErrorHandler = Callable[[StepFailure], None]


def _coerce(raw: StepReturn) -> StepResult:
    if isinstance(raw, StepResult):
        return raw
    if raw is None or raw is True:
        return StepResult.success()
    if raw is False:
        return StepResult.failure("step returned False")
    raise TypeError(f"Step must return StepResult, bool or None, got {type(raw).__name__}")


class FlowController:
    """
    Ordered step pipeline with a single error continuation.

    Attributes:
        name: Flow name used in logs
        state: Current FlowState
        events: Everything recorded during the run, in order
        results: Successful step values keyed by step name
        failure: The failure that moved the flow to ERROR, if any

    Example:
        >>> flow = FlowController("nightly", on_error=alert)
        >>> flow.add_step("load", load).add_step("price", price)
        >>> flow.run({"engine": engine})
        <FlowState.DONE: 'DONE'>
    """

    def __init__(self, name: str = "flow", on_error: Optional[ErrorHandler] = None):
        self.name = name
        self.on_error = on_error
        self.state = FlowState.INIT
        self.events: list[FlowEvent] = []
        self.results: dict[str, Any] = {}
        self.failure: Optional[StepFailure] = None
        self._steps: list[tuple[str, StepFn]] = []

    # ==================== BUILDING ====================

    def add_step(self, name: str, fn: StepFn) -> "FlowController":
        if self.state is not FlowState.INIT:
            raise FlowStateError(f"Cannot add steps to flow '{self.name}' in {self.state.value}")
        if any(existing == name for existing, _ in self._steps):
            raise ValueError(f"Duplicate step name: {name}")
        self._steps.append((name, fn))
        return self

    def branch(
        self,
        name: str,
        selector: Callable[[Context], Hashable],
        handlers: Mapping[Hashable, StepFn],
        default: Optional[StepFn] = None,
    ) -> StepFn:
        """
        Build a step that dispatches to the handler chosen by `selector`.

        A selector key with no handler and no default fails the step.
        """

        def _branch(context: Context) -> StepResult:
            key = selector(context)
            handler = handlers.get(key, default)
            if handler is None:
                return StepResult.failure(f"no handler for branch key {key!r}")
            self._record(FlowEvent(kind="branch", step=name, detail=str(key)))
            return _coerce(handler(context))

        return _branch

    def bounded_loop(
        self,
        name: str,
        body: LoopBody,
        limit: int = FLOW_LOOP_LIMIT,
        predicate: Optional[Callable[[int], bool]] = None,
    ) -> StepFn:
        """
        Build a step that runs `body(counter, context)` while `predicate(counter)` holds.

        The predicate defaults to `counter < limit`. If a custom predicate is
        still true once `limit` iterations have run, the step fails instead of
        looping forever. Each completed iteration records an "iteration" event.
        On success the step's value is the number of iterations run.
        """
        if limit < 0:
            raise ValueError("Loop limit must be non-negative")
        keep_going = predicate or (lambda counter: counter < limit)

        def _loop(context: Context) -> StepResult:
            counter = 0
            while keep_going(counter):
                if counter >= limit:
                    return StepResult.failure(f"loop limit of {limit} reached")
                outcome = _coerce(body(counter, context))
                self._record(FlowEvent(kind="iteration", step=name, iteration=counter))
                if not outcome.ok:
                    return StepResult.failure(
                        f"iteration {counter} failed: {outcome.detail or 'no detail'}"
                    )
                counter += 1
            return StepResult.success(value=counter)

        return _loop

    # ==================== RUNNING ====================

    def _record(self, event: FlowEvent) -> None:
        self.events.append(event)

    def _transition(self, state: FlowState, detail: Optional[str] = None) -> None:
        self.state = state
        self._record(FlowEvent(kind="transition", state=state, detail=detail))
        flow_transitions.labels(state=state.value).inc()
        logger.info("flow_transition", flow=self.name, state=state.value, detail=detail)

    def _fail(self, failure: StepFailure) -> FlowState:
        self.failure = failure
        self._record(FlowEvent(kind="step_failed", step=failure.step, detail=failure.detail))
        self._transition(FlowState.ERROR, detail=failure.step)
        if self.on_error is not None:
            self.on_error(failure)
        return self.state

    def run(self, context: Optional[Context] = None) -> FlowState:
        """
        Run all steps in order.

        Args:
            context: Shared mutable dict passed to every step

        Returns:
            FlowState: DONE if every step succeeded, ERROR otherwise

        Raises:
            FlowStateError: If the flow has already been started
        """
        if self.state is not FlowState.INIT:
            raise FlowStateError(f"Flow '{self.name}' already {self.state.value}")

        ctx: Context = context if context is not None else {}
        self._transition(FlowState.RUNNING)

        for step_name, fn in self._steps:
            try:
                result = _coerce(fn(ctx))
            except HotelPricingError as e:
                logger.error(
                    "flow_step_rejected",
                    flow=self.name,
                    step=step_name,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                return self._fail(StepFailure(step=step_name, detail=str(e), error=e))
            except Exception as e:
                logger.exception("flow_step_raised", flow=self.name, step=step_name)
                return self._fail(StepFailure(step=step_name, detail=str(e), error=e))

            if not result.ok:
                return self._fail(
                    StepFailure(step=step_name, detail=result.detail or "step failed")
                )

            self.results[step_name] = result.value
            self._record(FlowEvent(kind="step_succeeded", step=step_name, detail=result.detail))

        self._transition(FlowState.DONE)
        return self.state

    def iterations(self, step: str) -> list[FlowEvent]:
        """Iteration events recorded for a loop step."""
        return [e for e in self.events if e.kind == "iteration" and e.step == step]
