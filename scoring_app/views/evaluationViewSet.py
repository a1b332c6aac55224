import logging

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response

from scoring_app.serializers.evaluation_serializer import (
    AssigneeRequestSerializer, EvaluationResultSerializer, FeedbackRequestSerializer,
    InputChangeSerializer, TaskRequestSerializer,
)
from scoring_app.services.aggregate_math import calculate_comprehensive_result
from scoring_app.services.directory import get_directory
from scoring_app.services.evaluation_store import (
    ensure_task_data, update_metric_input, update_qualitative_opinion, update_qualitative_score,
)
from scoring_app.services.feedback_client import FeedbackClient
from scoring_app.services.task_math import calculate_task_result
from scoring_app.utils import get_assignee_or_404, get_task_or_404

logger = logging.getLogger(__name__)


class EvaluationViewSet(viewsets.ViewSet):
    """
    Stateless scoring endpoints. The client posts its evaluation blob with
    every request; endpoints that change it return the blob to persist.

    • POST /evaluations/initialize/    → seed missing records for a person's tasks
    • POST /evaluations/inputs/        → apply one input change
    • POST /evaluations/score/         → single-task result
    • POST /evaluations/comprehensive/ → person-level result
    • POST /evaluations/feedback/      → AI feedback text
    """

    def get_directory(self):
        return get_directory()

    def _validated(self, serializer_class, request):
        serializer = serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    @action(detail=False, methods=["post"], url_path="initialize")
    def initialize(self, request):
        data = self._validated(AssigneeRequestSerializer, request)
        directory = self.get_directory()
        get_assignee_or_404(directory, data["assignee_id"])

        store, period = data["evaluations"], data["period"]
        for task in directory.tasks_for(data["assignee_id"], period):
            ensure_task_data(store, period, task)

        return Response({"evaluations": store.save_all()}, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="inputs")
    def inputs(self, request):
        data = self._validated(InputChangeSerializer, request)
        store, period = data["evaluations"], data["period"]
        task = get_task_or_404(self.get_directory(), period, data["task_id"])

        target = data["target"]
        if target == InputChangeSerializer.TARGET_METRIC:
            update_metric_input(store, period, task, data["metric_id"], data["value"])
        elif target == InputChangeSerializer.TARGET_SCORE:
            update_qualitative_score(store, period, task, data["value"])
        else:
            update_qualitative_opinion(store, period, task, data["value"])

        result = calculate_task_result(task, store.get(period, task.task_id))
        return Response({
            "evaluations": store.save_all(),
            "result": EvaluationResultSerializer(result).data,
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="score")
    def score(self, request):
        data = self._validated(TaskRequestSerializer, request)
        period = data["period"]
        task = get_task_or_404(self.get_directory(), period, data["task_id"])

        result = calculate_task_result(task, data["evaluations"].get(period, task.task_id))
        return Response(EvaluationResultSerializer(result).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="comprehensive")
    def comprehensive(self, request):
        data = self._validated(AssigneeRequestSerializer, request)
        directory = self.get_directory()
        get_assignee_or_404(directory, data["assignee_id"])

        tasks = directory.tasks_for(data["assignee_id"], data["period"])
        result = calculate_comprehensive_result(tasks, data["evaluations"], data["period"])
        return Response(EvaluationResultSerializer(result).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["post"], url_path="feedback")
    def feedback(self, request):
        data = self._validated(FeedbackRequestSerializer, request)
        directory = self.get_directory()
        store, period = data["evaluations"], data["period"]

        if data.get("task_id"):
            task = get_task_or_404(directory, period, data["task_id"])
            result = calculate_task_result(task, store.get(period, task.task_id))
        else:
            get_assignee_or_404(directory, data["assignee_id"])
            tasks = directory.tasks_for(data["assignee_id"], period)
            result = calculate_comprehensive_result(tasks, store, period)

        text = FeedbackClient.from_settings().generate(result)
        logger.info("Generated feedback for %s (final %.1f)",
                    data.get("task_id") or data.get("assignee_id"), result.final_score)
        return Response({
            "feedback": text,
            "result": EvaluationResultSerializer(result).data,
        }, status=status.HTTP_200_OK)
