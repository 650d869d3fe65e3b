from django.core.management.base import BaseCommand, CommandError

from widgets.exceptions import NotFound
from widgets.services import WidgetsService

FIRST_LAYER = "first"


class Command(BaseCommand):
    help = "Move a widget up or down within its zone, or to another layer."

    def add_arguments(self, parser):
        parser.add_argument("widget_id", type=int)
        action = parser.add_mutually_exclusive_group(required=True)
        action.add_argument("--up", action="store_true", help="Move the widget before its predecessor.")
        action.add_argument("--down", action="store_true", help="Move the widget after its successor.")
        action.add_argument(
            "--layer",
            nargs="?",
            const=FIRST_LAYER,
            type=int,
            help="Move the widget to this layer id, or to the first layer when no id is given.",
        )

    def handle(self, *args, **options):
        service = WidgetsService()
        widget_id = options["widget_id"]

        try:
            if options["up"]:
                moved = service.move_widget_up(widget_id)
                noop = "Widget is already first in its zone."
            elif options["down"]:
                moved = service.move_widget_down(widget_id)
                noop = "Widget is already last in its zone."
            else:
                layer_id = None if options["layer"] == FIRST_LAYER else options["layer"]
                moved = service.move_widget_to_layer(widget_id, layer_id)
                if layer_id is None:
                    noop = "There are no widget layers defined."
                else:
                    noop = f"Layer not found: {layer_id}"
        except NotFound as exc:
            raise CommandError(str(exc)) from exc

        if not moved:
            self.stdout.write(self.style.WARNING(noop))
            return

        widget = service.get_widget(widget_id)
        self.stdout.write(
            self.style.SUCCESS(
                f"Widget {widget.pk} is now at position {widget.position} in zone {widget.zone} (layer {widget.layer_id})."
            )
        )
