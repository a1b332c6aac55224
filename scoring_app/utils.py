from rest_framework import serializers
from rest_framework.exceptions import NotFound


class LabelChoiceField(serializers.ChoiceField):
    """Accept either the stored value or its label (case-insensitive); render the label."""

    def to_internal_value(self, data):
        data_str = str(data)
        if data_str in self.choices:
            return data_str
        for key, label in self.choices.items():
            if str(label).lower() == data_str.lower():
                return key
        self.fail('invalid_choice', input=data)

    def to_representation(self, value):
        return self.choices.get(value, super().to_representation(value))


def get_task_or_404(directory, period, task_id):
    task = directory.get_task(period, task_id)
    if task is None:
        raise NotFound(f"No work item '{task_id}' in period '{period}'.")
    return task


def get_assignee_or_404(directory, assignee_id):
    assignee = directory.get_assignee(assignee_id)
    if assignee is None:
        raise NotFound(f"No assignee '{assignee_id}'.")
    return assignee
