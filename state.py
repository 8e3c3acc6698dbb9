"""Calculator session state and its transitions.

CalculatorState is immutable; every transition returns a new state. Each
input edit or unit switch bumps `generation`, which doubles as the token for
tips requests so that a response for an older result is discarded.
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, replace

from bmi import BmiResult, compute_bmi
from tips import HealthTips
from units import (
    HeightUnit,
    WeightUnit,
    cm_to_ft_in,
    format_decimal,
    ft_in_to_cm,
    height_to_m,
    kg_to_lbs,
    lbs_to_kg,
    parse_number,
    weight_to_kg,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculatorState:
    """Input fields as typed, plus the derived result and tips."""
    weight_unit: WeightUnit = WeightUnit.KG
    height_unit: HeightUnit = HeightUnit.CM
    weight_metric: str = "70"
    weight_imperial: str = "154"
    height_metric: str = "170"
    height_ft: str = "5"
    height_in: str = "7"
    result: BmiResult | None = None
    tips: HealthTips | None = None
    loading_tips: bool = False
    generation: int = 0

    @property
    def weight_text(self) -> str:
        """Text of the weight field for the active unit."""
        return self.weight_metric if self.weight_unit is WeightUnit.KG else self.weight_imperial

    def as_dict(self) -> dict:
        return {
            "weight_unit": self.weight_unit.value,
            "height_unit": self.height_unit.value,
            "weight_metric": self.weight_metric,
            "weight_imperial": self.weight_imperial,
            "height_metric": self.height_metric,
            "height_ft": self.height_ft,
            "height_in": self.height_in,
            "result": self.result.as_dict() if self.result else None,
            "tips": self.tips.as_dict() if self.tips else None,
            "loading_tips": self.loading_tips,
            "generation": self.generation,
        }


def _invalidate(state: CalculatorState, **changes) -> CalculatorState:
    """Apply changes that make the current result and tips stale."""
    return replace(
        state,
        result=None,
        tips=None,
        loading_tips=False,
        generation=state.generation + 1,
        **changes,
    )


def apply_weight_edit(state: CalculatorState, text: str) -> CalculatorState:
    """Store new text in the weight field of the active unit."""
    if state.weight_unit is WeightUnit.KG:
        return _invalidate(state, weight_metric=text)
    return _invalidate(state, weight_imperial=text)


def apply_height_edit(
    state: CalculatorState,
    cm: str | None = None,
    feet: str | None = None,
    inches: str | None = None,
) -> CalculatorState:
    """Store new text in the height fields. Fields left as None keep their value."""
    changes = {}
    if cm is not None:
        changes["height_metric"] = cm
    if feet is not None:
        changes["height_ft"] = feet
    if inches is not None:
        changes["height_in"] = inches
    return _invalidate(state, **changes)


def switch_weight_unit(state: CalculatorState, unit: WeightUnit) -> CalculatorState:
    """Switch the weight unit, carrying the current value over when there is one."""
    if unit is state.weight_unit:
        return state

    changes = {}
    if unit is WeightUnit.LBS:
        lbs = kg_to_lbs(parse_number(state.weight_metric))
        if lbs is not None:
            changes["weight_imperial"] = format_decimal(lbs)
    else:
        kg = lbs_to_kg(parse_number(state.weight_imperial))
        if kg is not None:
            changes["weight_metric"] = format_decimal(kg)

    return _invalidate(state, weight_unit=unit, **changes)


def switch_height_unit(state: CalculatorState, unit: HeightUnit) -> CalculatorState:
    """Switch the height unit, carrying the current value over when there is one."""
    if unit is state.height_unit:
        return state

    changes = {}
    if unit is HeightUnit.FT:
        ft_in = cm_to_ft_in(parse_number(state.height_metric))
        if ft_in is not None:
            feet, inches = ft_in
            changes["height_ft"] = str(feet)
            changes["height_in"] = str(inches)
    else:
        cm = ft_in_to_cm(parse_number(state.height_ft), parse_number(state.height_in))
        if cm is not None:
            changes["height_metric"] = format_decimal(cm)

    return _invalidate(state, height_unit=unit, **changes)


def recalculate(state: CalculatorState) -> CalculatorState:
    """Recompute the BMI result from the current fields."""
    weight_kg = weight_to_kg(parse_number(state.weight_text), state.weight_unit)
    height_m = height_to_m(
        state.height_unit,
        cm=parse_number(state.height_metric),
        feet=parse_number(state.height_ft),
        inches=parse_number(state.height_in),
    )
    result = compute_bmi(weight_kg, height_m)
    if result is None:
        return replace(state, result=None, tips=None, loading_tips=False)
    return replace(state, result=result)


def request_tips(state: CalculatorState) -> tuple[CalculatorState, int | None]:
    """Mark tips as loading. Returns the token to hand back with the response."""
    if state.result is None:
        return state, None
    return replace(state, loading_tips=True), state.generation


def receive_tips_result(state: CalculatorState, token: int | None, tips: HealthTips) -> CalculatorState:
    """Accept tips only if they were requested for the current generation."""
    if token is None or token != state.generation or state.result is None:
        log.debug("Discarding stale tips (token=%s, generation=%d)", token, state.generation)
        return state
    return replace(state, tips=tips, loading_tips=False)


class SessionStore:
    """In-memory calculator states keyed by session id.

    Least recently used sessions are dropped past max_sessions.
    """

    def __init__(self, max_sessions: int):
        self.max_sessions = max_sessions
        self._states: OrderedDict[str, CalculatorState] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._states)

    def get(self, session_id: str) -> CalculatorState:
        """Return the state for session_id, creating a fresh one if needed."""
        with self._lock:
            state = self._states.get(session_id)
            if state is None:
                state = recalculate(CalculatorState())
                self._put(session_id, state)
            else:
                self._states.move_to_end(session_id)
            return state

    def update(self, session_id: str, transition, *args, **kwargs) -> CalculatorState:
        """Apply transition to the stored state atomically and store the outcome."""
        with self._lock:
            state = self._states.get(session_id) or recalculate(CalculatorState())
            state = transition(state, *args, **kwargs)
            self._put(session_id, state)
            return state

    def begin_tips(self, session_id: str) -> tuple[CalculatorState, int | None]:
        """Mark tips as loading for session_id and return the request token."""
        with self._lock:
            state = self._states.get(session_id) or recalculate(CalculatorState())
            state, token = request_tips(state)
            self._put(session_id, state)
            return state, token

    def _put(self, session_id: str, state: CalculatorState) -> None:
        self._states[session_id] = state
        self._states.move_to_end(session_id)
        while len(self._states) > self.max_sessions:
            evicted, _ = self._states.popitem(last=False)
            log.debug("Evicted calculator session %s", evicted)
