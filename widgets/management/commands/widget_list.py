import json
from dataclasses import asdict

from django.core.management.base import BaseCommand, CommandError

from widgets.services import WidgetsService
from widgets.view_models import summarize_widgets


class Command(BaseCommand):
    help = "List widgets ordered by zone and position."

    def add_arguments(self, parser):
        parser.add_argument("--zone", help="Only list widgets in this zone.")
        parser.add_argument("--layer", type=int, help="Only list widgets assigned to this layer id.")
        parser.add_argument("--orphans", action="store_true", help="List widgets without a layer.")
        parser.add_argument("--json", action="store_true", help="Emit JSON output.")

    def handle(self, *args, **options):
        service = WidgetsService()
        layer_id = options.get("layer")

        if options.get("orphans"):
            widgets = service.get_orphaned_widgets()
        else:
            if layer_id is not None and service.find_layer(layer_id) is None:
                raise CommandError(f"Layer not found: {layer_id}")
            widgets = service.get_widgets(layer_id)
        if options.get("zone"):
            widgets = widgets.filter(zone=options["zone"])

        rows = summarize_widgets(widgets)

        if options.get("json"):
            self.stdout.write(json.dumps([asdict(row) for row in rows]))
            return

        if not rows:
            self.stdout.write("No widgets found.")
            return

        headers = ["ID", "ZONE", "POSITION", "TYPE", "LAYER", "TITLE"]
        table = [
            {
                "ID": str(row.id),
                "ZONE": row.zone,
                "POSITION": row.position,
                "TYPE": row.widget_type,
                "LAYER": "" if row.layer_id is None else str(row.layer_id),
                "TITLE": row.title,
            }
            for row in rows
        ]
        widths = {header: max([len(header), *(len(line[header]) for line in table)]) for header in headers}

        format_str = "  ".join(f"{{{header}:<{widths[header]}}}" for header in headers)
        self.stdout.write(format_str.format(**{header: header for header in headers}))
        for line in table:
            self.stdout.write(format_str.format(**line))
