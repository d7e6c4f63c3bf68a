"""Unit tests for step list helpers."""
import pytest

from interval_sync.models import IntervalControls
from interval_sync.services.step_utils import (
    build_step,
    clean_interval_steps,
    count_steps_by_type,
    filter_steps_by_type,
    filter_work_steps,
    generate_interval_structure,
    find_cooldown_index,
    get_step_index_in_type,
    get_step_label,
    get_step_label_auto,
    group_steps_by_type,
    is_manually_detailed,
    last_effort_index,
    normalize_duration,
    parse_interval_structure,
    renumber_steps,
    steps_from_payload,
)
from factories import make_step, make_steps, types_of


class TestDetailedPredicate:
    """is_manually_detailed() keys off pace and hr only."""

    @pytest.mark.parametrize(
        "pace,hr,expected",
        [
            ("", None, False),
            (None, None, False),
            ("04:30", None, True),
            ("", 150, True),
            ("", 0, True),
        ],
    )
    def test_predicate(self, pace, hr, expected):
        assert is_manually_detailed(make_step("effort", pace=pace, hr=hr)) is expected

    def test_duration_and_distance_do_not_count(self):
        assert not is_manually_detailed(make_step("effort", duration="05:00", distance=1.0))


class TestRebuildHelpers:

    def test_build_step_is_blank(self):
        step = build_step("recovery", "00:45", 0.2)
        assert step.step_type == "recovery"
        assert step.duration == "00:45"
        assert step.distance == 0.2
        assert step.pace == ""
        assert step.hr is None

    def test_build_step_normalizes_empty_values(self):
        step = build_step("effort", None, 0)
        assert step.duration == ""
        assert step.distance is None

    def test_renumber_steps(self):
        steps = [make_step("warmup", 7), make_step("effort", 7), make_step("cooldown", 2)]

        renumbered = renumber_steps(steps)

        assert [s.step_number for s in renumbered] == [1, 2, 3]
        assert [s.step_number for s in steps] == [7, 7, 2]

    def test_find_cooldown_index(self):
        assert find_cooldown_index(make_steps("warmup", "effort", "cooldown")) == 2
        assert find_cooldown_index(make_steps("warmup", "effort")) == 2
        assert find_cooldown_index([]) == 0

    def test_last_effort_index(self):
        assert last_effort_index(make_steps("effort", "recovery", "effort", "cooldown")) == 2
        assert last_effort_index(make_steps("warmup", "cooldown")) is None


class TestFilteringAndGrouping:

    def test_filter_by_type(self, three_rep_steps):
        assert len(filter_steps_by_type(three_rep_steps, "effort")) == 3
        assert filter_steps_by_type(three_rep_steps, "all") is three_rep_steps

    def test_filter_work_steps(self, three_rep_steps):
        assert types_of(filter_work_steps(three_rep_steps)) == [
            "effort", "recovery", "effort", "recovery", "effort"
        ]

    def test_group_and_count(self, three_rep_steps):
        groups = group_steps_by_type(three_rep_steps)
        assert set(groups) == {"warmup", "effort", "recovery", "cooldown"}
        assert count_steps_by_type(three_rep_steps) == {
            "warmup": 1, "effort": 3, "recovery": 2, "cooldown": 1
        }

    def test_count_empty(self):
        assert count_steps_by_type([]) == {"warmup": 0, "effort": 0, "recovery": 0, "cooldown": 0}


class TestLabels:

    def test_french_labels(self):
        assert get_step_label(make_step("warmup"), 0, "fr") == "Échauf."
        assert get_step_label(make_step("cooldown"), 0, "fr") == "Retour"
        assert get_step_label(make_step("effort"), 1, "fr") == "E2"
        assert get_step_label(make_step("recovery"), 0, "fr") == "R1"

    def test_english_labels(self):
        assert get_step_label(make_step("warmup"), 0, "en") == "Warmup"
        assert get_step_label(make_step("cooldown"), 0, "en") == "Cooldown"

    def test_auto_label_uses_position_within_type(self, three_rep_steps):
        third_effort = three_rep_steps[5]
        assert get_step_index_in_type(third_effort, three_rep_steps) == 2
        assert get_step_label_auto(third_effort, three_rep_steps, "en") == "E3"

    def test_missing_step_index(self, three_rep_steps):
        assert get_step_index_in_type(make_step("effort", duration="nope"), three_rep_steps) == -1


class TestCleanIntervalSteps:

    def test_recovery_before_cooldown_dropped(self):
        steps = make_steps("warmup", "effort", "recovery", "cooldown")
        assert types_of(clean_interval_steps(steps)) == ["warmup", "effort", "cooldown"]

    def test_trailing_recovery_dropped(self):
        steps = make_steps("effort", "recovery")
        assert types_of(clean_interval_steps(steps)) == ["effort"]

    def test_recovery_between_efforts_kept(self, three_rep_steps):
        assert clean_interval_steps(three_rep_steps) == three_rep_steps

    def test_empty(self):
        assert clean_interval_steps(None) == []
        assert clean_interval_steps([]) == []


class TestStepsFromPayload:
    """Raw form payloads are validated step by step."""

    def test_camel_case_payload(self):
        payload = [
            {"id": "abc", "stepNumber": 1, "stepType": "warmup", "duration": "", "distance": None,
             "pace": "", "hr": None},
            {"stepNumber": 2, "stepType": "effort", "duration": "01:00", "distance": 0.4,
             "pace": "03:50", "hr": 171, "hrRange": "165-175"},
        ]

        steps = steps_from_payload(payload)

        assert types_of(steps) == ["warmup", "effort"]
        assert steps[1].hr == 171
        assert steps[1].hr_range == "165-175"
        assert steps[1].is_manually_detailed()

    def test_invalid_entries_skipped(self, caplog):
        payload = [
            {"stepNumber": 1, "stepType": "sprint"},
            {"stepNumber": 2, "stepType": "effort", "hr": "not a number"},
            {"stepNumber": 3, "stepType": "cooldown"},
        ]

        with caplog.at_level("WARNING"):
            steps = steps_from_payload(payload)

        assert types_of(steps) == ["cooldown"]
        assert "Skipping invalid interval step" in caplog.text

    def test_none_payload(self):
        assert steps_from_payload(None) == []

    def test_fractional_heart_rate_kept(self):
        """Lap-average heart rates are fractional; the detailed effort must survive loading."""
        payload = [
            {"stepType": "warmup"},
            {"stepType": "effort", "duration": "03:00", "hr": 168.4},
            {"stepType": "cooldown"},
        ]

        steps = steps_from_payload(payload)

        assert types_of(steps) == ["warmup", "effort", "cooldown"]
        assert steps[1].hr == 168.4
        assert is_manually_detailed(steps[1])


class TestIntervalStructure:
    """Summary strings like "VMA: 8x5'00 R:2'00" map to and from the controls."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("5'00", "05:00"), ("5'", "05:00"), ("10'30", "10:30"), ("5", "05:00"), ("4:30", "04:30")],
    )
    def test_normalize_duration(self, raw, expected):
        assert normalize_duration(raw) == expected

    def test_parse_with_recovery(self):
        controls = parse_interval_structure("vma: 8x5'00 R:2'00")

        assert controls.workout_type == "VMA"
        assert controls.repetition_count == 8
        assert controls.effort_duration == "05:00"
        assert controls.recovery_duration == "02:00"
        assert controls.effort_distance is None

    def test_parse_slashed(self):
        controls = parse_interval_structure("6x3'/1'30")

        assert controls.workout_type is None
        assert controls.repetition_count == 6
        assert controls.effort_duration == "03:00"
        assert controls.recovery_duration == "01:30"

    def test_parse_effort_only(self):
        controls = parse_interval_structure("SEUIL: 4x10'")

        assert controls.repetition_count == 4
        assert controls.effort_duration == "10:00"
        assert controls.recovery_duration is None

    @pytest.mark.parametrize("text", [None, "", "easy run", "VMA 8x"])
    def test_parse_unrecognized(self, text):
        assert parse_interval_structure(text) is None

    def test_generate_from_controls(self):
        controls = IntervalControls(workout_type="VMA", repetition_count=8,
                                    effort_duration="05:00", recovery_duration="02:00")

        assert generate_interval_structure(controls) == "VMA: 8x05:00 R:02:00"

    def test_generated_text_parses_back(self):
        controls = IntervalControls(workout_type="SEUIL", repetition_count=4,
                                    effort_duration="10:00", recovery_duration="03:00")

        parsed = parse_interval_structure(generate_interval_structure(controls))

        assert parsed.repetition_count == 4
        assert parsed.effort_duration == "10:00"
        assert parsed.recovery_duration == "03:00"

    def test_generate_from_steps(self, three_rep_steps):
        controls = IntervalControls(workout_type="VMA")

        assert generate_interval_structure(controls, three_rep_steps) == "VMA: 3x01:00 R:00:30"

    def test_generate_from_steps_without_recovery(self):
        steps = make_steps("warmup", "effort", "cooldown", effort_duration="20:00")

        assert generate_interval_structure(IntervalControls(workout_type="TEMPO"), steps) == "TEMPO: 1x20:00"

    def test_generate_fallbacks(self):
        assert generate_interval_structure(IntervalControls(workout_type="VMA")) == "VMA"
        assert generate_interval_structure(IntervalControls()) == ""
        assert generate_interval_structure(None) == ""
