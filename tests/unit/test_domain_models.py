"""Testes dos modelos de domínio e dos patches tipados."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from roleplay_sim.domain.enums import (
    DEFAULT_INTENT,
    CustomerIntent,
    Difficulty,
    SimStage,
    coerce_intent,
)
from roleplay_sim.domain.models import (
    FlagsPatch,
    SimFlags,
    SimInternalState,
    StatePatch,
    TrainingConfig,
)


class TestInitialState:
    def test_defaults(self):
        state = SimInternalState()
        assert state.sim_stage == SimStage.INTRO
        assert state.turn_count == 0
        assert state.trust == 0.25
        assert state.objection_resistance == 0.0
        assert state.clarity_level == 0.5
        assert state.urgency_to_decide == 0.1
        assert state.confusion_level == 0.3
        assert state.training_config.difficulty == Difficulty.NORMAL

    def test_affect_snapshot(self):
        affect = SimInternalState(trust=0.9).affect()
        assert affect.trust == 0.9
        assert affect.clarity_level == 0.5

    def test_affect_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            SimInternalState(trust=1.5)


class TestTrainingConfig:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, Difficulty.NORMAL),
            ("", Difficulty.NORMAL),
            ("easy", Difficulty.EASY),
            (" TOUGH ", Difficulty.TOUGH),
            ("impossible", Difficulty.NIGHTMARE),
        ],
    )
    def test_difficulty_fallback(self, raw, expected):
        assert TrainingConfig(difficulty=raw).difficulty == expected

    def test_customer_type_defaults_to_mixed(self):
        assert TrainingConfig(customer_type=None).customer_type == "mixed"
        assert TrainingConfig(customer_type="skeptic").customer_type == "skeptic"

    def test_frozen(self):
        config = TrainingConfig()
        with pytest.raises(ValidationError):
            config.difficulty = Difficulty.EASY


class TestCoerceIntent:
    def test_known_label(self):
        assert coerce_intent("SOFT_YES_METER") == (CustomerIntent.SOFT_YES_METER, False)

    @pytest.mark.parametrize("raw", ["MAYBE_LATER", "", None, 42, "soft_yes_meter"])
    def test_unknown_label_falls_back(self, raw):
        assert coerce_intent(raw) == (DEFAULT_INTENT, True)


class TestStatePatch:
    def test_only_set_fields_are_changes(self):
        patch = StatePatch(trust=0.7)
        assert patch.changes() == {"trust": 0.7}

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            StatePatch(mood=0.3)

    def test_turn_count_not_patchable(self):
        with pytest.raises(ValidationError):
            StatePatch(turn_count=10)

    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            StatePatch(confusion_level=-0.1)

    def test_from_affect(self):
        affect = SimInternalState().affect()
        assert set(StatePatch.from_affect(affect).changes()) == {
            "trust",
            "objection_resistance",
            "clarity_level",
            "urgency_to_decide",
            "confusion_level",
        }


class TestFlagsPatch:
    def test_from_flags_copies_everything(self):
        flags = SimFlags(objection_turns=3, at_meter=True)
        changes = FlagsPatch.from_flags(flags).changes()
        assert changes["objection_turns"] == 3
        assert changes["at_meter"] is True
        assert len(changes) == len(SimFlags.model_fields)

    def test_negative_counter_rejected(self):
        with pytest.raises(ValidationError):
            FlagsPatch(objection_turns=-1)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            FlagsPatch(ready_for_meter_check=True)
