from django.contrib import admin
from . import models as m


class WorkItemInline(admin.TabularInline):
    model = m.WorkItem
    extra = 0
    fields = ("period", "task_id", "name", "task_type")


# ───────────────────────────────
#  Assignee
# ───────────────────────────────
@admin.register(m.Assignee)
class AssigneeAdmin(admin.ModelAdmin):
    list_display = ("assignee_id", "name", "department", "created_at")
    search_fields = ("assignee_id", "name", "department")
    inlines = [WorkItemInline]


# ───────────────────────────────
#  WorkItem
# ───────────────────────────────
@admin.register(m.WorkItem)
class WorkItemAdmin(admin.ModelAdmin):
    list_display = ("period", "task_id", "name", "task_type", "assignee")
    search_fields = ("task_id", "name", "assignee__name")
    list_filter = ("period", "task_type")
    autocomplete_fields = ["assignee"]
