# scoring_app/management/commands/seed_directory.py
from django.core.management.base import BaseCommand
from scoring_app.services.directory import generate_work_items


class Command(BaseCommand):
    help = "Seed the demo people and generate their work items for an evaluation period."

    def add_arguments(self, parser):
        parser.add_argument("period", help="Evaluation period, e.g. 2025-H1")

    def handle(self, *args, **options):
        period = options["period"]
        people, tasks = generate_work_items(period)
        if people or tasks:
            self.stdout.write(self.style.SUCCESS(
                f"✓ {period}: {people} people and {tasks} work items created"))
        else:
            self.stdout.write(self.style.WARNING(f"{period} work items already exist"))
