from dataclasses import dataclass, field
from typing import List, Optional

from scoring_app.models import Grade
from scoring_app.services.evaluation_store import TaskEvaluationData
from scoring_app.services.metric_rules import MetricRule, rules_for

QUANT_RATIO = 0.7
QUAL_RATIO = 0.3

GRADE_THRESHOLDS = (
    (90, Grade.S),
    (80, Grade.A),
    (70, Grade.B),
)


@dataclass(frozen=True)
class CalculatedMetric:
    rule: MetricRule
    input_value: float
    raw_score: float
    weighted_score: float


@dataclass(frozen=True)
class TaskSummary:
    task_id: str
    task_name: str
    final_score: float
    quant_converted: float
    qual_converted: float


@dataclass(frozen=True)
class EvaluationResult:
    quant_total_weighted: float = 0.0
    quant_converted: float = 0.0
    qual_converted: float = 0.0
    final_score: float = 0.0
    grade: str = Grade.C
    breakdown: List[CalculatedMetric] = field(default_factory=list)
    qualitative_opinion: Optional[str] = None
    is_comprehensive: bool = False
    task_summaries: List[TaskSummary] = field(default_factory=list)


def zero_result() -> EvaluationResult:
    return EvaluationResult()


def grade_for(final_score: float) -> str:
    """Inclusive lower bounds, checked from the top; no clamping."""
    for threshold, grade in GRADE_THRESHOLDS:
        if final_score >= threshold:
            return grade
    return Grade.C


def calculate_metric(rule: MetricRule, data: TaskEvaluationData) -> CalculatedMetric:
    input_value = data.input_for(rule.metric_id)
    raw_score = rule.score(input_value)
    return CalculatedMetric(
        rule=rule,
        input_value=input_value,
        raw_score=raw_score,
        weighted_score=raw_score * (rule.weight / 100),
    )


def calculate_task_result(task, data: Optional[TaskEvaluationData]) -> EvaluationResult:
    """
    Score one work item from its stored inputs.

    1) breakdown: each rule of the task's rule set, in order, with
       weighted = raw × weight / 100 (missing inputs count as 0)
    2) quant_converted = Σ weighted × 0.7, qual_converted = qualitative × 0.3
    3) final = quant_converted + qual_converted, graded S/A/B/C

    No data for the task yet → zero result with grade C.
    """
    if data is None:
        return zero_result()

    breakdown = [calculate_metric(rule, data) for rule in rules_for(task.task_type)]

    quant_total_weighted = sum(m.weighted_score for m in breakdown)
    quant_converted = quant_total_weighted * QUANT_RATIO
    qual_converted = data.qualitative_score * QUAL_RATIO
    final_score = quant_converted + qual_converted

    return EvaluationResult(
        quant_total_weighted=quant_total_weighted,
        quant_converted=quant_converted,
        qual_converted=qual_converted,
        final_score=final_score,
        grade=grade_for(final_score),
        breakdown=breakdown,
        qualitative_opinion=data.qualitative_opinion,
    )
