from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from scoring_app.models import Assignee, WorkItem
from scoring_app.filters import WorkItemFilter
from scoring_app.serializers.directory_serializer import AssigneeSerializer, WorkItemSerializer


class AssigneeViewSet(viewsets.ReadOnlyModelViewSet):
    """
    • GET /assignees/                        → list people
    • GET /assignees/{id}/                   → one person
    • GET /assignees/{id}/tasks/?period=...  → their work items in a period
    """
    queryset = Assignee.objects.all()
    serializer_class = AssigneeSerializer
    lookup_field = "assignee_id"

    @action(detail=True, methods=["get"], url_path="tasks")
    def tasks(self, request, assignee_id=None):
        assignee = self.get_object()
        period = request.query_params.get("period")
        if not period:
            return Response({"error": "period is required."}, status=status.HTTP_400_BAD_REQUEST)

        qs = assignee.work_items.filter(period=period).order_by("task_id")
        return Response(WorkItemSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class WorkItemViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = WorkItem.objects.select_related("assignee")
    serializer_class = WorkItemSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = WorkItemFilter
