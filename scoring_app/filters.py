import django_filters as filters
from scoring_app.models import WorkItem, TaskType


class WorkItemFilter(filters.FilterSet):
    period      = filters.CharFilter(field_name="period", lookup_expr="exact")
    assignee_id = filters.CharFilter(field_name="assignee__assignee_id", lookup_expr="exact")
    task_type   = filters.ChoiceFilter(field_name="task_type", choices=TaskType.choices)

    class Meta:
        model = WorkItem
        fields = ["period", "assignee_id", "task_type"]
