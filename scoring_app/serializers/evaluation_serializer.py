from rest_framework import serializers

from scoring_app.services.evaluation_store import EvaluationStore
from scoring_app.serializers.metric_rule_serializer import MetricRuleSerializer


# ── request serializers ─────────────────────────────────────────────────

class EvaluationBlobSerializer(serializers.Serializer):
    """
    `evaluations` is the client's persisted blob, keyed by "<period>-<taskId>".
    It is parsed into an EvaluationStore; a missing blob is an empty store.
    """
    period      = serializers.CharField(max_length=20)
    evaluations = serializers.JSONField(required=False, allow_null=True, default=None)

    def validate_evaluations(self, value):
        try:
            return EvaluationStore.load_all(value)
        except ValueError as exc:
            raise serializers.ValidationError(str(exc))


class TaskRequestSerializer(EvaluationBlobSerializer):
    task_id = serializers.CharField(max_length=40)


class AssigneeRequestSerializer(EvaluationBlobSerializer):
    assignee_id = serializers.CharField(max_length=40)


class FeedbackRequestSerializer(EvaluationBlobSerializer):
    """Exactly one of task_id (single task view) or assignee_id (comprehensive)."""
    task_id     = serializers.CharField(max_length=40, required=False)
    assignee_id = serializers.CharField(max_length=40, required=False)

    def validate(self, attrs):
        if bool(attrs.get("task_id")) == bool(attrs.get("assignee_id")):
            raise serializers.ValidationError("Provide either task_id or assignee_id.")
        return attrs


class InputChangeSerializer(TaskRequestSerializer):
    TARGET_METRIC  = "metric"
    TARGET_SCORE   = "qualitative_score"
    TARGET_OPINION = "qualitative_opinion"

    target    = serializers.ChoiceField(choices=[TARGET_METRIC, TARGET_SCORE, TARGET_OPINION])
    metric_id = serializers.CharField(max_length=40, required=False)
    value     = serializers.JSONField(allow_null=True)

    def validate(self, attrs):
        if attrs["target"] == self.TARGET_METRIC and not attrs.get("metric_id"):
            raise serializers.ValidationError({"metric_id": "Required when target is 'metric'."})
        return attrs


# ── response serializers ────────────────────────────────────────────────

class CalculatedMetricSerializer(serializers.Serializer):
    rule           = MetricRuleSerializer()
    input_value    = serializers.FloatField()
    raw_score      = serializers.FloatField()
    weighted_score = serializers.FloatField()


class TaskSummarySerializer(serializers.Serializer):
    task_id         = serializers.CharField()
    task_name       = serializers.CharField()
    final_score     = serializers.FloatField()
    quant_converted = serializers.FloatField()
    qual_converted  = serializers.FloatField()


class EvaluationResultSerializer(serializers.Serializer):
    quant_total_weighted = serializers.FloatField()
    quant_converted      = serializers.FloatField()
    qual_converted       = serializers.FloatField()
    final_score          = serializers.FloatField()
    grade                = serializers.CharField()
    breakdown            = CalculatedMetricSerializer(many=True)
    qualitative_opinion  = serializers.CharField(allow_null=True)
    is_comprehensive     = serializers.BooleanField()
    task_summaries       = TaskSummarySerializer(many=True)
