import pytest
from scoring_app.models import Category, TaskType
from scoring_app.services import task_math
from scoring_app.services.metric_rules import MetricRule, RuleKind
from scoring_app.services.task_math import calculate_task_result, grade_for


class TestGrade:
    @pytest.mark.parametrize("final, grade", [
        (100, "S"), (90, "S"), (89.99, "A"), (80, "A"), (79.99, "B"),
        (70, "B"), (69.99, "C"), (0, "C"), (-5, "C"), (130, "S"),
    ])
    def test_inclusive_lower_bounds(self, final, grade):
        assert grade_for(final) == grade


class TestTaskScorer:
    def test_missing_data_gives_zero_result(self, make_task):
        result = calculate_task_result(make_task(), None)
        assert result.final_score == 0
        assert result.quant_converted == 0
        assert result.qual_converted == 0
        assert result.grade == "C"
        assert result.breakdown == []
        assert result.is_comprehensive is False

    def test_perfect_inputs(self, make_task, make_data, perfect_inputs):
        result = calculate_task_result(make_task(), make_data(perfect_inputs, qualitative_score=100))
        assert result.quant_total_weighted == pytest.approx(100)
        assert result.quant_converted == pytest.approx(70)
        assert result.qual_converted == pytest.approx(30)
        assert result.final_score == pytest.approx(100)
        assert result.grade == "S"

    def test_breakdown_follows_rule_order_and_weights(self, make_task, make_data):
        data = make_data({
            "plan_specificity": 105,   # 90
            "schedule_changes": 3,     # 70
            "start_compliance": 80,    # 80
            "deadline_compliance": 60, # 60
            "delay_days": 10,          # 90
        }, qualitative_score=50, opinion="Solid work")
        result = calculate_task_result(make_task(task_type=TaskType.DEVELOPMENT), data)

        assert [m.rule.metric_id for m in result.breakdown] == [
            "plan_specificity", "schedule_changes", "start_compliance",
            "deadline_compliance", "delay_days",
        ]
        assert [m.raw_score for m in result.breakdown] == pytest.approx([90, 70, 80, 60, 90])
        assert [m.weighted_score for m in result.breakdown] == pytest.approx([18, 14, 16, 12, 18])
        assert result.quant_total_weighted == pytest.approx(78)
        assert result.quant_converted == pytest.approx(54.6)
        assert result.qual_converted == pytest.approx(15)
        assert result.final_score == pytest.approx(69.6)
        assert result.grade == "C"
        assert result.qualitative_opinion == "Solid work"

    def test_missing_metric_counts_as_zero_input(self, make_task, make_data):
        # no inputs at all: plan 0 → 100, changes 0 → 100, rates 0 → 0, delay 0 → 100
        result = calculate_task_result(make_task(), make_data({}, qualitative_score=0))
        assert [m.input_value for m in result.breakdown] == [0, 0, 0, 0, 0]
        assert result.quant_total_weighted == pytest.approx(60)

    def test_converted_scores_are_exact_products(self, make_task, make_data):
        data = make_data({"plan_specificity": 123, "schedule_changes": 7, "start_compliance": 33.3,
                          "deadline_compliance": 91.7, "delay_days": 42}, qualitative_score=73)
        result = calculate_task_result(make_task(), data)
        total = sum(m.weighted_score for m in result.breakdown)
        assert result.quant_total_weighted == total
        assert result.quant_converted == total * 0.7
        assert result.qual_converted == 73 * 0.3
        assert result.final_score == result.quant_converted + result.qual_converted

    def test_scoring_is_idempotent(self, make_task, make_data, perfect_inputs):
        task, data = make_task(), make_data(perfect_inputs, qualitative_score=61)
        assert calculate_task_result(task, data) == calculate_task_result(task, data)

    def test_misconfigured_weights_are_not_clamped(self, make_task, make_data, monkeypatch):
        heavy = [MetricRule("only", Category.QUALITY, "Only", "", 150, RuleKind.PERCENT_CLAMP)]
        monkeypatch.setattr(task_math, "rules_for", lambda task_type: heavy)
        result = calculate_task_result(make_task(), make_data({"only": 100}, qualitative_score=0))
        assert result.quant_total_weighted == pytest.approx(150)
        assert result.quant_converted == pytest.approx(105)
        assert result.grade == "S"
