"""
Render Elastic Beanstalk's cron.yaml from the periodic task registry.

Every registered periodic task with a schedule becomes one cron entry. The
daemon POSTs each entry to its ``url`` with the entry ``name`` in the
``X-Aws-Sqsd-Taskname`` header, so all entries point at the periodic tasks
route and the name is the registry name.

Usage:
    python manage.py render_cron_yaml > cron.yaml
"""

import json

from django.core.management.base import BaseCommand

from sqsgate.consumer.settings import ConsumerSettings
from sqsgate.consumer.tasks.registry import periodic_tasks


def _quote(value: str) -> str:
    # JSON strings are valid YAML double-quoted scalars.
    return json.dumps(value)


class Command(BaseCommand):
    help = "Print a cron.yaml for the registered periodic tasks"

    def handle(self, *args, **options):
        route = ConsumerSettings.from_settings().periodic_tasks_route
        tasks = periodic_tasks.scheduled()

        skipped = [task.name for task in periodic_tasks if not task.is_scheduled]
        for name in skipped:
            self.stderr.write(
                self.style.WARNING(f"Skipping {name}: no schedule registered"),
            )

        lines = ["version: 1", "cron:"]
        if not tasks:
            lines[-1] = "cron: []"
        for task in tasks:
            lines.append(f"  - name: {_quote(task.name)}")
            lines.append(f"    url: {_quote(route)}")
            lines.append(f"    schedule: {_quote(task.schedule)}")
        self.stdout.write("\n".join(lines))
