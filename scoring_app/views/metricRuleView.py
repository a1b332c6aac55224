from rest_framework import status
from rest_framework.response import Response
from rest_framework.exceptions import ValidationError
from rest_framework.views import APIView

from scoring_app.models import TaskType
from scoring_app.serializers.metric_rule_serializer import MetricRuleSerializer
from scoring_app.services.metric_rules import rule_weight_total, rules_for
from scoring_app.utils import LabelChoiceField


class MetricRuleView(APIView):
    """GET /metric-rules/?task_type=PLANNING → ordered rule set for that classification."""

    def get(self, request):
        raw_type = request.query_params.get("task_type", TaskType.PLANNING)
        type_field = LabelChoiceField(choices=TaskType.choices)
        try:
            task_type = type_field.to_internal_value(raw_type)
        except ValidationError:
            return Response({
                "error": "Invalid task_type.",
                "allowed_values": [choice[0] for choice in TaskType.choices],
                "allowed_labels": [choice[1] for choice in TaskType.choices],
            }, status=status.HTTP_400_BAD_REQUEST)

        rules = rules_for(task_type)
        return Response({
            "task_type": task_type,
            "total_weight": rule_weight_total(rules),
            "rules": MetricRuleSerializer(rules, many=True).data,
        }, status=status.HTTP_200_OK)
