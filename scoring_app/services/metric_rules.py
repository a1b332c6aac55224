import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping

from scoring_app.models import Category, TaskType

logger = logging.getLogger(__name__)

TOTAL_WEIGHT = 100


class RuleKind(str, Enum):
    STEPPED_DECAY  = "STEPPED_DECAY"
    LINEAR_PENALTY = "LINEAR_PENALTY"
    PERCENT_CLAMP  = "PERCENT_CLAMP"


# ---- scoring functions -------------------------------------------------
# Every function is total over the reals and returns a plain float.

def stepped_decay(value: float, *, threshold: float, cutoff: float, step: float, penalty: float) -> float:
    """
    100 up to `threshold`, 0 past `cutoff`, and in between lose `penalty`
    points per full `step` above the threshold (never below 0).

    Plan specificity (100/150/5/10): f(100)=100, f(105)=90, f(150)=0.
    """
    if value <= threshold:
        return 100.0
    if value > cutoff:
        return 0.0
    steps = math.floor((value - threshold) / step)
    return max(0.0, 100.0 - steps * penalty)


def linear_penalty(value: float, *, per_unit: float) -> float:
    """100 minus `per_unit` points per unit of input, floored at 0."""
    return max(0.0, 100.0 - value * per_unit)


def percent_clamp(value: float) -> float:
    """Rate in percent used as the score, clamped to [0, 100]."""
    return min(100.0, max(0.0, float(value)))


SCORING_FUNCTIONS: Dict[RuleKind, Callable[..., float]] = {
    RuleKind.STEPPED_DECAY: stepped_decay,
    RuleKind.LINEAR_PENALTY: linear_penalty,
    RuleKind.PERCENT_CLAMP: percent_clamp,
}


@dataclass(frozen=True)
class MetricRule:
    metric_id: str
    category: Category
    name: str
    description: str
    weight: float
    kind: RuleKind
    params: Mapping[str, float] = field(default_factory=dict)
    unit: str = ""
    placeholder: str = ""
    criteria: str = ""
    default_input: float = 0.0

    def score(self, value) -> float:
        value = float(value)
        if math.isnan(value):
            value = 0.0
        return float(SCORING_FUNCTIONS[self.kind](value, **self.params))


# ── Unified rule set ─────────────────────────────────────────────────────
UNIFIED_RULES: List[MetricRule] = [
    MetricRule(
        metric_id="plan_specificity",
        category=Category.PLANNING,
        name="Plan specificity",
        description="Average duration of level-2 plans",
        weight=20,
        kind=RuleKind.STEPPED_DECAY,
        params={"threshold": 100, "cutoff": 150, "step": 5, "penalty": 10},
        unit="days",
        placeholder="Duration",
        criteria="<=100 days: 100, -10 per 5 days over, >150 days: 0",
        default_input=90,
    ),
    MetricRule(
        metric_id="schedule_changes",
        category=Category.PLANNING,
        name="Schedule-change compliance",
        description="Number of schedule changes",
        weight=20,
        kind=RuleKind.LINEAR_PENALTY,
        params={"per_unit": 10},
        unit="changes",
        placeholder="Count",
        criteria="-10 per change",
        default_input=1,
    ),
    MetricRule(
        metric_id="start_compliance",
        category=Category.OPERATION,
        name="Start-date compliance",
        description="Share of work started on the planned date",
        weight=20,
        kind=RuleKind.PERCENT_CLAMP,
        unit="%",
        placeholder="Rate",
        criteria="rate = score",
        default_input=100,
    ),
    MetricRule(
        metric_id="deadline_compliance",
        category=Category.OPERATION,
        name="Deadline compliance",
        description="Share of work completed by the deadline",
        weight=20,
        kind=RuleKind.PERCENT_CLAMP,
        unit="%",
        placeholder="Rate",
        criteria="rate = score",
        default_input=100,
    ),
    MetricRule(
        metric_id="delay_days",
        category=Category.OPERATION,
        name="Delay days",
        description="Total days of delay",
        weight=20,
        kind=RuleKind.LINEAR_PENALTY,
        params={"per_unit": 1},
        unit="days",
        placeholder="Delay",
        criteria="-1 per day of delay",
        default_input=0,
    ),
]

# Every classification currently shares the unified set.
RULE_SETS: Dict[str, List[MetricRule]] = {
    TaskType.PLANNING: UNIFIED_RULES,
    TaskType.DEVELOPMENT: UNIFIED_RULES,
}


def rules_for(task_type) -> List[MetricRule]:
    """Ordered rule set for a classification; unknown classifications raise ValueError."""
    try:
        return RULE_SETS[task_type]
    except KeyError:
        raise ValueError(f"Unknown task type: {task_type!r}") from None


def rule_weight_total(rules) -> float:
    return sum(rule.weight for rule in rules)


def check_rule_weights(rule_sets: Mapping[str, List[MetricRule]] = None) -> List[str]:
    """
    Log a warning for each rule set whose weights do not add up to 100.
    Scoring is unaffected; returns the offending task types.
    """
    rule_sets = RULE_SETS if rule_sets is None else rule_sets
    offending = []
    for task_type, rules in rule_sets.items():
        total = rule_weight_total(rules)
        if total != TOTAL_WEIGHT:
            logger.warning("Rule set for %s has weights summing to %s, expected %s",
                           task_type, total, TOTAL_WEIGHT)
            offending.append(task_type)
    return offending
