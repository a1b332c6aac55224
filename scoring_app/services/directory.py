"""
Where people and work items come from.

The scorer and aggregator only need objects exposing ``task_id``, ``name``
and ``task_type``; the directory configured in ``settings.SCORING["DIRECTORY"]``
supplies them to the views and commands.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from django.utils.module_loading import import_string

from scoring_app.models import Assignee, TaskType, WorkItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssigneeRecord:
    assignee_id: str
    name: str
    department: str = ""


@dataclass(frozen=True)
class TaskRecord:
    task_id: str
    assignee_id: str
    name: str
    task_type: str
    period: str = ""


class WorkItemDirectory(ABC):
    @abstractmethod
    def assignees(self) -> List:
        ...

    @abstractmethod
    def get_assignee(self, assignee_id):
        ...

    @abstractmethod
    def tasks_for(self, assignee_id, period) -> List:
        ...

    @abstractmethod
    def get_task(self, period, task_id):
        ...


class OrmDirectory(WorkItemDirectory):
    def assignees(self):
        return list(Assignee.objects.all())

    def get_assignee(self, assignee_id):
        return Assignee.objects.filter(assignee_id=assignee_id).first()

    def tasks_for(self, assignee_id, period):
        return list(WorkItem.objects.filter(assignee_id=assignee_id, period=period)
                    .order_by("task_id"))

    def get_task(self, period, task_id):
        return WorkItem.objects.filter(period=period, task_id=task_id).first()


class StaticDirectory(WorkItemDirectory):
    """
    In-memory directory. Tasks without a period belong to every period,
    which is how a fixed demo list behaves.
    """

    def __init__(self, assignees: Iterable[AssigneeRecord] = (), tasks: Iterable[TaskRecord] = ()):
        self._assignees = list(assignees)
        self._tasks = list(tasks)

    def _in_period(self, task, period):
        return not task.period or task.period == period

    def assignees(self):
        return list(self._assignees)

    def get_assignee(self, assignee_id) -> Optional[AssigneeRecord]:
        return next((a for a in self._assignees if a.assignee_id == assignee_id), None)

    def tasks_for(self, assignee_id, period):
        return [t for t in self._tasks
                if t.assignee_id == assignee_id and self._in_period(t, period)]

    def get_task(self, period, task_id) -> Optional[TaskRecord]:
        return next((t for t in self._tasks
                     if t.task_id == task_id and self._in_period(t, period)), None)


def get_directory() -> WorkItemDirectory:
    return import_string(settings.SCORING["DIRECTORY"])()


# ---- demo data -----------------------------------------------------------

DEMO_ASSIGNEES = (
    AssigneeRecord("user1", "Kim Cheolsu", "Planning"),
    AssigneeRecord("user2", "Lee Younghee", "Development"),
)

DEMO_TASKS = (
    TaskRecord("t1", "user1", "New service planning", TaskType.PLANNING),
    TaskRecord("t2", "user1", "Operations process improvement", TaskType.PLANNING),
    TaskRecord("t3", "user2", "Backend API refactoring", TaskType.DEVELOPMENT),
    TaskRecord("t4", "user2", "Payment system integration", TaskType.DEVELOPMENT),
)


class DemoDirectory(StaticDirectory):
    """The fixed demo people and tasks, present in every period."""

    def __init__(self):
        super().__init__(DEMO_ASSIGNEES, DEMO_TASKS)


def generate_work_items(period, assignees=None, tasks=None):
    """
    Create the people and this period's work items if they don't exist yet.
    Defaults to the demo records. Existing work items are left untouched.
    Returns (assignees_created, tasks_created).
    """
    if assignees is None:
        assignees = DEMO_ASSIGNEES
    if tasks is None:
        tasks = DEMO_TASKS
    assignees_created = tasks_created = 0
    with transaction.atomic():
        for record in assignees:
            _, created = Assignee.objects.get_or_create(
                assignee_id=record.assignee_id,
                defaults=dict(name=record.name, department=record.department),
            )
            assignees_created += int(created)

        for record in tasks:
            _, created = WorkItem.objects.get_or_create(
                period=period,
                task_id=record.task_id,
                defaults=dict(
                    assignee_id=record.assignee_id,
                    name=record.name,
                    task_type=record.task_type,
                ),
            )
            tasks_created += int(created)

    logger.info("Generated work items for %s: %d people, %d tasks created",
                period, assignees_created, tasks_created)
    return assignees_created, tasks_created
