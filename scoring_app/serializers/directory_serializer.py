from rest_framework import serializers
from scoring_app.models import Assignee, WorkItem, TaskType
from scoring_app.utils import LabelChoiceField


class AssigneeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Assignee
        fields = ["assignee_id", "name", "department"]
        read_only_fields = fields


class WorkItemSerializer(serializers.ModelSerializer):
    """
    • `assignee_id` / `assignee` give the owner's id and display name.
    • `task_type` renders as its label, accepts value or label.
    """
    assignee_id = serializers.CharField(source="assignee.assignee_id", read_only=True)
    assignee    = serializers.CharField(source="assignee.name", read_only=True)
    task_type   = LabelChoiceField(choices=TaskType.choices)

    class Meta:
        model = WorkItem
        fields = ["task_id", "period", "name", "task_type", "assignee_id", "assignee"]
        read_only_fields = fields
