from django.db import models
from django.utils import timezone

# ── Lookup / Enum helpers ────────────────────────────────────────────────

class Category(models.TextChoices):
    PLANNING  = "PLANNING",  "Planning"
    OPERATION = "OPERATION", "Operation"
    QUALITY   = "QUALITY",   "Quality"

class TaskType(models.TextChoices):
    PLANNING    = "PLANNING",    "Planning"
    DEVELOPMENT = "DEVELOPMENT", "Development"

class Grade(models.TextChoices):
    S = "S", "Outstanding"
    A = "A", "Excellent"
    B = "B", "Average"
    C = "C", "Insufficient"


# ── Directory tables ─────────────────────────────────────────────────────
# People and their work items. Evaluation inputs are never stored here:
# they live in the client's blob and are handed to the scoring services.

class Assignee(models.Model):
    assignee_id = models.CharField(primary_key=True, max_length=40)
    name        = models.CharField(max_length=120)
    department  = models.CharField(max_length=120, blank=True)
    created_at  = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["assignee_id"]

    def __str__(self):
        return f"{self.name} ({self.department})" if self.department else self.name


class WorkItem(models.Model):
    task_id    = models.CharField(max_length=40)
    period     = models.CharField(max_length=20)      # e.g. '2025-H1', never parsed
    assignee   = models.ForeignKey(Assignee, on_delete=models.CASCADE, related_name="work_items")
    name       = models.CharField(max_length=200)
    task_type  = models.CharField(max_length=12, choices=TaskType.choices)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["period", "task_id"]
        constraints = [
            models.UniqueConstraint(fields=["period", "task_id"], name="uniq_task_per_period")
        ]

    def __str__(self):
        return f"{self.period}-{self.task_id} {self.name}"
