"""
Evaluation data records and the key-value store they are persisted in.

The browser keeps one JSON blob under ``STORAGE_KEY``. Its shape is::

    {"<period>-<taskId>": {"metrics": {"<metricId>": {"configId": ..., "inputValue": ...}},
                           "qualitativeScore": 80,
                           "qualitativeOpinion": ""}}

Nothing here performs I/O: the store is built from an already-loaded blob
and hands back the blob it wants persisted.
"""
import json
import logging
import math
from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from scoring_app.services.metric_rules import rules_for

logger = logging.getLogger(__name__)

STORAGE_KEY = "perf-dashboard-evaluations"

DEFAULT_QUALITATIVE_SCORE = 80.0


def _num(x) -> float:
    """Coerce to float; junk and NaN become 0."""
    try:
        value = float(x)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value):
        return 0.0
    return value


def clamp_score(x) -> float:
    return min(100.0, max(0.0, _num(x)))


def storage_key(period, task_id) -> str:
    return f"{period}-{task_id}"


@dataclass(frozen=True)
class MetricInput:
    config_id: str
    input_value: float = 0.0

    def to_dict(self):
        return {"configId": self.config_id, "inputValue": self.input_value}

    @classmethod
    def from_dict(cls, metric_id, raw):
        if not isinstance(raw, dict):
            raw = {}
        return cls(
            config_id=str(raw.get("configId") or metric_id),
            input_value=_num(raw.get("inputValue", 0)),
        )


@dataclass(frozen=True)
class TaskEvaluationData:
    metrics: Dict[str, MetricInput] = field(default_factory=dict)
    qualitative_score: float = 0.0
    qualitative_opinion: str = ""

    def input_for(self, metric_id) -> float:
        metric = self.metrics.get(metric_id)
        return metric.input_value if metric is not None else 0.0

    def to_dict(self):
        return {
            "metrics": {metric_id: m.to_dict() for metric_id, m in self.metrics.items()},
            "qualitativeScore": self.qualitative_score,
            "qualitativeOpinion": self.qualitative_opinion,
        }

    @classmethod
    def from_dict(cls, raw):
        raw = raw or {}
        raw_metrics = raw.get("metrics") or {}
        if not isinstance(raw_metrics, dict):
            logger.warning("Ignoring malformed metrics of type %s", type(raw_metrics).__name__)
            raw_metrics = {}
        metrics = {}
        for metric_id, value in raw_metrics.items():
            if not isinstance(value, dict):
                logger.warning("Skipping malformed metric input %s", metric_id)
                continue
            metrics[str(metric_id)] = MetricInput.from_dict(str(metric_id), value)
        return cls(
            metrics=metrics,
            qualitative_score=_num(raw.get("qualitativeScore", 0)),
            qualitative_opinion=str(raw.get("qualitativeOpinion") or ""),
        )


class EvaluationStore:
    """In-memory view over the persisted blob, keyed by (period, task id)."""

    def __init__(self, records: Optional[Dict[str, TaskEvaluationData]] = None):
        self._records: Dict[str, TaskEvaluationData] = dict(records or {})

    def __len__(self):
        return len(self._records)

    def __contains__(self, key):
        return key in self._records

    def get(self, period, task_id) -> Optional[TaskEvaluationData]:
        return self._records.get(storage_key(period, task_id))

    def set(self, period, task_id, data: TaskEvaluationData) -> None:
        self._records[storage_key(period, task_id)] = data

    @classmethod
    def load_all(cls, blob) -> "EvaluationStore":
        """
        Build a store from the persisted blob: a dict, a JSON string, or
        nothing at all (empty store). Unknown shapes are skipped, not fatal.
        """
        if blob in (None, ""):
            return cls()
        if isinstance(blob, (str, bytes)):
            blob = json.loads(blob)
        if not isinstance(blob, dict):
            raise ValueError("Evaluation blob must be a JSON object")

        records = {}
        for key, raw in blob.items():
            if not isinstance(raw, dict):
                logger.warning("Skipping malformed evaluation record %s", key)
                continue
            records[str(key)] = TaskEvaluationData.from_dict(raw)
        return cls(records)

    def save_all(self) -> dict:
        return {key: data.to_dict() for key, data in self._records.items()}

    def dumps(self) -> str:
        return json.dumps(self.save_all(), ensure_ascii=False)


# ---- input-change operations -------------------------------------------
# Each one replaces a single field of a single record.

def seeded_task_data(task) -> TaskEvaluationData:
    metrics = {
        rule.metric_id: MetricInput(config_id=rule.metric_id, input_value=float(rule.default_input))
        for rule in rules_for(task.task_type)
    }
    return TaskEvaluationData(
        metrics=metrics,
        qualitative_score=DEFAULT_QUALITATIVE_SCORE,
        qualitative_opinion="",
    )


def ensure_task_data(store: EvaluationStore, period, task) -> TaskEvaluationData:
    data = store.get(period, task.task_id)
    if data is None:
        data = seeded_task_data(task)
        store.set(period, task.task_id, data)
        logger.info("Seeded evaluation data for %s", storage_key(period, task.task_id))
    return data


def update_metric_input(store: EvaluationStore, period, task, metric_id, value) -> TaskEvaluationData:
    data = ensure_task_data(store, period, task)
    metrics = dict(data.metrics)
    metrics[metric_id] = MetricInput(config_id=metric_id, input_value=_num(value))
    data = replace(data, metrics=metrics)
    store.set(period, task.task_id, data)
    return data


def update_qualitative_score(store: EvaluationStore, period, task, score) -> TaskEvaluationData:
    data = replace(ensure_task_data(store, period, task), qualitative_score=clamp_score(score))
    store.set(period, task.task_id, data)
    return data


def update_qualitative_opinion(store: EvaluationStore, period, task, text) -> TaskEvaluationData:
    data = replace(ensure_task_data(store, period, task), qualitative_opinion=str(text or ""))
    store.set(period, task.task_id, data)
    return data
