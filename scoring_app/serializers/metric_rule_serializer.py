from rest_framework import serializers


class MetricRuleSerializer(serializers.Serializer):
    metric_id   = serializers.CharField()
    category    = serializers.CharField()
    category_label = serializers.CharField(source="category.label")
    name        = serializers.CharField()
    description = serializers.CharField()
    weight      = serializers.FloatField()
    kind        = serializers.CharField(source="kind.value")
    params      = serializers.DictField(child=serializers.FloatField())
    unit        = serializers.CharField()
    placeholder = serializers.CharField()
    criteria    = serializers.CharField()
