"""Tests for parsing agent text into a WorkoutPlan."""

import json
import unittest

from forgeai.plan_parser import (
    DEFAULT_AGENT_FOCUS,
    DEFAULT_REASONING,
    NeedsFallback,
    Failed,
    Parsed,
    build_workout_plan,
    parse_workout_text,
    slice_json_object,
    strip_code_fences,
)


class TextCleanupTests(unittest.TestCase):
    def test_strip_code_fences(self):
        self.assertEqual(strip_code_fences('```json\n{"a": 1}\n```'), '{"a": 1}')

    def test_slice_json_object_drops_commentary(self):
        text = 'Here is your plan: {"title": "X"} Enjoy!'
        self.assertEqual(slice_json_object(text), '{"title": "X"}')

    def test_slice_without_braces_returns_text(self):
        self.assertEqual(slice_json_object("no json"), "no json")


class ParseWorkoutTextTests(unittest.TestCase):
    def test_fenced_minimal_plan(self):
        result = parse_workout_text('```json\n{"title":"Leg Day"}\n```')
        self.assertIsInstance(result, Parsed)
        plan = result.plan
        self.assertEqual(plan.title, "Leg Day")
        self.assertEqual(plan.warmup, [])
        self.assertEqual(plan.main_exercises, [])
        self.assertEqual(plan.reasoning, "Optimized session generated by ForgeAI.")
        self.assertEqual(plan.fatigue_level, "medium")

    def test_not_json_needs_fallback(self):
        result = parse_workout_text("Today we rest. No JSON here.")
        self.assertIsInstance(result, NeedsFallback)
        self.assertIsInstance(result.error, ValueError)

    def test_final_attempt_reports_failed(self):
        result = parse_workout_text("still not json", final=True)
        self.assertIsInstance(result, Failed)

    def test_top_level_list_is_a_failure(self):
        self.assertIsInstance(parse_workout_text('[{"title": "x"}]'), NeedsFallback)

    def test_none_text(self):
        self.assertIsInstance(parse_workout_text(None), NeedsFallback)

    def test_nesting_too_deep_to_decode(self):
        text = '{"warmup": ' + "[" * 100000 + "]" * 100000 + "}"

        first = parse_workout_text(text)
        self.assertIsInstance(first, NeedsFallback)
        self.assertIsInstance(first.error, RecursionError)
        self.assertIsInstance(parse_workout_text(text, final=True), Failed)


class BuildWorkoutPlanTests(unittest.TestCase):
    def test_every_field_defaulted(self):
        plan = build_workout_plan({})
        self.assertEqual(plan.title, "Agent Workout")
        self.assertEqual(plan.cooldown, [])
        self.assertEqual(plan.reasoning, DEFAULT_REASONING)
        self.assertEqual(plan.alternatives, "None provided.")
        self.assertEqual(plan.metrics_to_track, "RPE and completion.")
        self.assertEqual(plan.phase, "General Physical Preparedness")
        self.assertEqual(plan.fatigue_level, "medium")
        self.assertEqual(plan.consistency_score, 0)
        self.assertEqual(plan.agent_focus, DEFAULT_AGENT_FOCUS)

    def test_non_dict_treated_as_empty(self):
        self.assertEqual(build_workout_plan(None).title, "Agent Workout")

    def test_main_exercise_alias_priority(self):
        plan = build_workout_plan({
            "mainBlock": ["From mainBlock"],
            "main": ["From main"],
        })
        self.assertEqual([e.name for e in plan.main_exercises], ["From mainBlock"])

        plan = build_workout_plan({"mainExercises": ["Primary"], "mainBlock": ["Secondary"]})
        self.assertEqual([e.name for e in plan.main_exercises], ["Primary"])

        plan = build_workout_plan({"mainExercises": [], "main": ["Fallback"]})
        self.assertEqual([e.name for e in plan.main_exercises], ["Fallback"])

    def test_rationale_alias(self):
        plan = build_workout_plan({"rationale": "Deload week"})
        self.assertEqual(plan.reasoning, "Deload week")

    def test_enums_normalized(self):
        plan = build_workout_plan({"fatigueLevel": "HIGH", "agentFocus": "adapting"})
        self.assertEqual(plan.fatigue_level, "high")
        self.assertEqual(plan.agent_focus, "Adapting")

    def test_unknown_enums_fall_back(self):
        plan = build_workout_plan({"fatigueLevel": "exhausted", "agentFocus": "Execution"})
        self.assertEqual(plan.fatigue_level, "medium")
        self.assertEqual(plan.agent_focus, "Executing")

    def test_consistency_score_clamped(self):
        self.assertEqual(build_workout_plan({"consistencyScore": 140}).consistency_score, 100)
        self.assertEqual(build_workout_plan({"consistencyScore": -5}).consistency_score, 0)
        self.assertEqual(build_workout_plan({"consistencyScore": "72"}).consistency_score, 72)
        self.assertEqual(build_workout_plan({"consistencyScore": "high"}).consistency_score, 0)

    def test_whole_consistency_score_stays_integral(self):
        plan = build_workout_plan({"consistencyScore": 55.0})
        self.assertEqual(plan.consistency_score, 55)
        self.assertIsInstance(plan.consistency_score, int)
        self.assertEqual(plan.to_dict()["consistencyScore"], 55)
        self.assertIsInstance(plan.to_dict()["consistencyScore"], int)
        self.assertEqual(build_workout_plan({"consistencyScore": 62.5}).consistency_score, 62.5)

    def test_reparse_of_own_output_is_idempotent(self):
        raw = {
            "title": "Push Day",
            "warmup": ["3 minutes rowing", {"Block": "Prep", "Movements": ["Band Pull-Apart"]}],
            "mainBlock": [{"name": "Bench", "sets": 5, "reps": "5", "RPE": 8}],
            "cooldown": [{"exercise": "Child's Pose"}],
            "rationale": "Fresh legs",
            "fatigueLevel": "low",
            "consistencyScore": 55,
            "agentFocus": "Planning",
        }
        first = build_workout_plan(raw)
        second = parse_workout_text(json.dumps(first.to_dict())).plan
        self.assertEqual(first, second)


if __name__ == "__main__":
    unittest.main()
