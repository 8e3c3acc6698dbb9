"""Tests for state module."""

import pytest

from bmi import BmiCategory
from state import (
    CalculatorState,
    SessionStore,
    apply_height_edit,
    apply_weight_edit,
    receive_tips_result,
    recalculate,
    request_tips,
    switch_height_unit,
    switch_weight_unit,
)
from tips import FALLBACK_TIPS, HealthTips
from units import HeightUnit, WeightUnit

TIPS = HealthTips(summary="Looking good.", tips=("Walk.", "Sleep.", "Hydrate."))


@pytest.fixture
def state():
    return recalculate(CalculatorState())


class TestRecalculate:
    """Tests for recalculate function."""

    def test_defaults(self, state):
        """Default fields are 70 kg and 170 cm."""
        assert state.result.bmi == 24.2
        assert state.result.category is BmiCategory.NORMAL

    def test_imperial_inputs(self):
        s = CalculatorState(
            weight_unit=WeightUnit.LBS,
            height_unit=HeightUnit.FT,
            weight_imperial="154",
            height_ft="5",
            height_in="7",
        )
        assert recalculate(s).result.bmi == 24.1

    @pytest.mark.parametrize("weight", ["", "abc", "0", "-4"])
    def test_invalid_weight_clears_result(self, state, weight):
        s = recalculate(apply_weight_edit(state, weight))
        assert s.result is None

    def test_missing_inches_count_as_zero(self):
        s = CalculatorState(height_unit=HeightUnit.FT, height_ft="6", height_in="")
        # 70 kg at 6 ft (1.8288 m)
        assert recalculate(s).result.bmi == 20.9


class TestEdits:
    """Tests for apply_weight_edit and apply_height_edit."""

    def test_weight_edit_in_kg(self, state):
        s = apply_weight_edit(state, "100")

        assert s.weight_metric == "100"
        assert s.weight_imperial == "154"
        assert s.result is None
        assert s.generation == state.generation + 1

    def test_weight_edit_in_lbs(self):
        s = apply_weight_edit(CalculatorState(weight_unit=WeightUnit.LBS), "200")
        assert s.weight_imperial == "200"
        assert s.weight_metric == "70"

    def test_height_edit_keeps_other_fields(self, state):
        s = apply_height_edit(state, feet="6")

        assert s.height_ft == "6"
        assert s.height_in == "7"
        assert s.height_metric == "170"

    def test_edit_clears_tips(self, state):
        s, token = request_tips(state)
        s = receive_tips_result(s, token, TIPS)
        assert s.tips == TIPS

        s = apply_height_edit(s, cm="180")
        assert s.tips is None
        assert s.loading_tips is False

    def test_state_is_immutable(self, state):
        with pytest.raises(AttributeError):
            state.weight_metric = "80"


class TestSwitchUnits:
    """Tests for switch_weight_unit and switch_height_unit."""

    def test_same_unit_is_noop(self, state):
        assert switch_weight_unit(state, WeightUnit.KG) is state
        assert switch_height_unit(state, HeightUnit.CM) is state

    def test_kg_to_lbs(self, state):
        s = switch_weight_unit(state, WeightUnit.LBS)

        assert s.weight_unit is WeightUnit.LBS
        assert s.weight_imperial == "154.3"
        assert s.result is None
        assert recalculate(s).result.bmi == 24.2

    def test_lbs_back_to_kg(self, state):
        s = switch_weight_unit(switch_weight_unit(state, WeightUnit.LBS), WeightUnit.KG)
        assert s.weight_metric == "70.0"

    def test_empty_weight_not_converted(self, state):
        s = switch_weight_unit(apply_weight_edit(state, ""), WeightUnit.LBS)
        assert s.weight_imperial == "154"

    def test_cm_to_ft(self, state):
        s = switch_height_unit(state, HeightUnit.FT)

        assert s.height_unit is HeightUnit.FT
        assert (s.height_ft, s.height_in) == ("5", "7")

    def test_ft_back_to_cm(self, state):
        s = switch_height_unit(switch_height_unit(state, HeightUnit.FT), HeightUnit.CM)
        assert s.height_metric == "170.2"

    def test_empty_ft_in_not_converted(self):
        s = CalculatorState(height_unit=HeightUnit.FT, height_ft="0", height_in="")
        assert switch_height_unit(s, HeightUnit.CM).height_metric == "170"


class TestTips:
    """Tests for request_tips and receive_tips_result."""

    def test_request_without_result(self):
        s = CalculatorState()
        assert request_tips(s) == (s, None)

    def test_request_and_receive(self, state):
        s, token = request_tips(state)
        assert s.loading_tips is True
        assert token == state.generation

        s = receive_tips_result(s, token, FALLBACK_TIPS)
        assert s.tips == FALLBACK_TIPS
        assert s.loading_tips is False

    def test_stale_response_discarded(self, state):
        """Tips requested before an edit do not attach to the new result."""
        s, token = request_tips(state)
        s = recalculate(apply_weight_edit(s, "90"))

        s = receive_tips_result(s, token, TIPS)
        assert s.tips is None
        assert s.result.bmi == 31.1

    def test_none_token_discarded(self, state):
        assert receive_tips_result(state, None, TIPS).tips is None


class TestSessionStore:
    """Tests for SessionStore class."""

    def test_get_creates_calculated_state(self):
        store = SessionStore(max_sessions=10)

        s = store.get("a")
        assert s.result.bmi == 24.2
        assert store.get("a") is s

    def test_update(self):
        store = SessionStore(max_sessions=10)

        s = store.update("a", apply_weight_edit, "80")
        assert s.weight_metric == "80"
        assert store.get("a") is s
        assert store.get("b").weight_metric == "70"

    def test_begin_tips(self):
        store = SessionStore(max_sessions=10)

        s, token = store.begin_tips("a")
        assert token == 0
        assert store.get("a").loading_tips is True
        assert s.loading_tips is True

    def test_least_recently_used_evicted(self):
        store = SessionStore(max_sessions=2)
        store.update("a", apply_weight_edit, "60")
        store.get("b")
        store.get("a")
        store.get("c")

        assert len(store) == 2
        assert store.get("a").weight_metric == "60"
        # "b" was evicted, so it comes back fresh
        assert store.get("b").generation == 0

    def test_as_dict(self, state):
        data = state.as_dict()

        assert data["weight_unit"] == "kg"
        assert data["result"] == {"bmi": 24.2, "category": "Normal Weight", "color": "#10b981"}
        assert data["tips"] is None
