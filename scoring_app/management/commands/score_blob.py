# scoring_app/management/commands/score_blob.py
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from scoring_app.services.aggregate_math import calculate_comprehensive_result
from scoring_app.services.directory import get_directory
from scoring_app.services.evaluation_store import EvaluationStore


class Command(BaseCommand):
    help = "Score an exported evaluation blob: per-task and comprehensive results per person."

    def add_arguments(self, parser):
        parser.add_argument("blob", help="Path to the exported evaluation JSON")
        parser.add_argument("period", help="Evaluation period, e.g. 2025-H1")
        parser.add_argument("--assignee", help="Only score this assignee id")

    def handle(self, *args, **options):
        path = Path(options["blob"])
        try:
            store = EvaluationStore.load_all(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise CommandError(f"Cannot read {path}: {exc}")
        except ValueError as exc:
            raise CommandError(f"Invalid evaluation blob: {exc}")

        period = options["period"]
        directory = get_directory()
        assignees = directory.assignees()
        if options["assignee"]:
            assignees = [a for a in assignees if a.assignee_id == options["assignee"]]
            if not assignees:
                raise CommandError(f"No assignee '{options['assignee']}'")

        for assignee in assignees:
            tasks = directory.tasks_for(assignee.assignee_id, period)
            result = calculate_comprehensive_result(tasks, store, period)
            self.stdout.write(f"{assignee.assignee_id} {assignee.name}: "
                              f"{result.final_score:.1f} ({result.grade})")
            for summary in result.task_summaries:
                self.stdout.write(f"  {summary.task_id} {summary.task_name}: "
                                  f"{summary.final_score:.1f} "
                                  f"[quant {summary.quant_converted:.1f} / qual {summary.qual_converted:.1f}]")

        self.stdout.write(self.style.SUCCESS(f"Scored {len(assignees)} assignee(s) for {period}."))
