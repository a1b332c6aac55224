# scoring_app/urls/api.py
from django.urls import path
from rest_framework.routers import DefaultRouter
from scoring_app.views.directoryViewSet import AssigneeViewSet, WorkItemViewSet
from scoring_app.views.evaluationViewSet import EvaluationViewSet
from scoring_app.views.metricRuleView import MetricRuleView

router = DefaultRouter()

router.register("assignees", AssigneeViewSet, basename="assignee")      #GET /api/assignees/ & /api/assignees/{id}/tasks/
router.register("work-items", WorkItemViewSet, basename="work-item")    #GET /api/work-items/?period=&assignee_id=
router.register("evaluations", EvaluationViewSet, basename="evaluation") #POST /api/evaluations/{action}/

urlpatterns = [
    path("metric-rules/", MetricRuleView.as_view(), name="metric-rules"),
    *router.urls
]
