import pytest
from rest_framework.test import APIClient

from scoring_app.models import Assignee, WorkItem, TaskType
from scoring_app.services.directory import TaskRecord
from scoring_app.services.evaluation_store import (
    EvaluationStore, MetricInput, TaskEvaluationData
)

PERIOD = "2025-H1"


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def create_assignee(db):
    def _create_assignee(**kw):
        defaults = dict(
            assignee_id=f"user{Assignee.objects.count() + 1}",
            name="Test Person",
            department="Planning",
        )
        defaults.update(kw)
        return Assignee.objects.create(**defaults)
    return _create_assignee


@pytest.fixture
def create_work_item(db, create_assignee):
    def _create_work_item(**kw):
        assignee = kw.pop("assignee", None) or create_assignee()
        defaults = dict(
            assignee=assignee,
            task_id=f"t{WorkItem.objects.count() + 1}",
            period=PERIOD,
            name="Test task",
            task_type=TaskType.PLANNING,
        )
        defaults.update(kw)
        return WorkItem.objects.create(**defaults)
    return _create_work_item


@pytest.fixture
def make_task():
    def _make_task(task_id="t1", assignee_id="user1", name="Task", task_type=TaskType.PLANNING):
        return TaskRecord(task_id, assignee_id, name, task_type)
    return _make_task


@pytest.fixture
def make_data():
    def _make_data(inputs=None, qualitative_score=80.0, opinion=""):
        metrics = {
            metric_id: MetricInput(config_id=metric_id, input_value=float(value))
            for metric_id, value in (inputs or {}).items()
        }
        return TaskEvaluationData(
            metrics=metrics,
            qualitative_score=qualitative_score,
            qualitative_opinion=opinion,
        )
    return _make_data


@pytest.fixture
def perfect_inputs():
    return {
        "plan_specificity": 30,
        "schedule_changes": 0,
        "start_compliance": 100,
        "deadline_compliance": 100,
        "delay_days": 0,
    }


@pytest.fixture
def store():
    return EvaluationStore()
