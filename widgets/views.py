import logging
from dataclasses import asdict

from django.http import JsonResponse
from django.views import View

from .exceptions import NotFound, WidgetsError
from .forms import ChooseWidgetForm, LayerForm, WidgetActionForm, WidgetCreateForm, WidgetEditForm
from .services import WidgetsService
from .view_models import (
    LayerHints,
    LayerSummary,
    ThemeSummary,
    WidgetChooser,
    WidgetSummary,
    WidgetTypeSummary,
    WidgetsIndex,
    summarize_widgets,
)

logger = logging.getLogger(__name__)


def _form_error(form) -> JsonResponse:
    return JsonResponse(
        {"error": "invalid_request", "errors": form.errors.get_json_data()},
        status=400,
    )


class WidgetsAdminView(View):
    """Base for the staff-only widget management endpoints.

    Service errors are mapped to JSON error responses: missing records to
    404, invalid zones and widget types to 400.
    """

    service_class = WidgetsService

    def dispatch(self, request, *args, **kwargs):
        user = request.user
        if not user.is_authenticated:
            return JsonResponse({"error": "unauthorized"}, status=401)
        if not user.is_staff:
            return JsonResponse({"error": "forbidden", "error_description": "Not authorized to manage widgets"}, status=403)

        self.service = self.service_class()
        try:
            return super().dispatch(request, *args, **kwargs)
        except NotFound as exc:
            return JsonResponse({"error": "not_found", "error_description": str(exc)}, status=404)
        except WidgetsError as exc:
            logger.info("Rejected widget request %s %s: %s", request.method, request.path, exc)
            return JsonResponse({"error": "invalid_request", "error_description": str(exc)}, status=400)


class WidgetIndexView(WidgetsAdminView):
    def get(self, request):
        layers = list(self.service.get_layers())
        if not layers:
            return JsonResponse(
                {
                    "error": "no_layers",
                    "error_description": "There are no widget layers defined. A layer will need to be added in order to add widgets to any part of the site.",
                },
                status=409,
            )

        layer_id = request.GET.get("layer")
        if layer_id:
            current_layer = next((layer for layer in layers if str(layer.pk) == layer_id), None)
            if current_layer is None:
                return JsonResponse({"error": "not_found", "error_description": f"Layer not found: {layer_id}"}, status=404)
        else:
            current_layer = layers[0]

        current_theme = self.service.get_current_theme()
        theme_zones = self.service.get_zones_for_theme(current_theme)
        orphan_zones = [zone for zone in self.service.get_zones() if zone not in theme_zones]

        index = WidgetsIndex(
            current_theme=ThemeSummary.from_theme(current_theme),
            current_layer=LayerSummary.from_layer(current_layer),
            layers=[LayerSummary.from_layer(layer) for layer in layers],
            widgets=summarize_widgets(self.service.get_widgets()),
            zones=theme_zones,
            orphan_zones=orphan_zones,
            orphan_widgets=summarize_widgets(self.service.get_orphaned_widgets()),
        )
        return JsonResponse(index.to_dict())

    def post(self, request):
        form = WidgetActionForm(request.POST)
        if not form.is_valid():
            return _form_error(form)

        widget_id = form.cleaned_data["widget_id"]
        action = form.action()
        if action == "move_out":
            self.service.delete_widget(widget_id)
            return JsonResponse({"deleted": True})
        if action == "move_up":
            moved = self.service.move_widget_up(widget_id)
        elif action == "move_down":
            moved = self.service.move_widget_down(widget_id)
        elif action == "move_here":
            moved = self.service.move_widget_to_layer(widget_id, form.cleaned_data.get("layer_id"))
        else:
            return JsonResponse({"error": "invalid_request", "error_description": "Unknown action"}, status=400)
        return JsonResponse({"moved": moved})


class ChooseWidgetView(WidgetsAdminView):
    def get(self, request):
        form = ChooseWidgetForm(request.GET)
        if not form.is_valid():
            return _form_error(form)

        layer = self.service.get_layer(form.cleaned_data["layer"])
        zone = form.cleaned_data["zone"]
        chooser = WidgetChooser(
            current_layer=LayerSummary.from_layer(layer),
            zone=zone,
            widget_types=[WidgetTypeSummary.from_type(cls) for cls in self.service.registry.get_all_widget_types()],
        )
        return JsonResponse(chooser.to_dict())


class AddWidgetView(WidgetsAdminView):
    def post(self, request):
        form = WidgetCreateForm(request.POST)
        if not form.is_valid():
            return _form_error(form)

        data = form.cleaned_data
        widget = self.service.create_widget(
            data["layer_id"],
            data["widget_type"],
            zone=data["zone"],
            title=data["title"],
            position=data["position"] or None,
            zones=self.service.placement_zones(),
        )
        return JsonResponse(asdict(WidgetSummary.from_widget(widget)), status=201)


class WidgetDetailView(WidgetsAdminView):
    def get(self, request, widget_id):
        widget = self.service.get_widget(widget_id)
        return JsonResponse(asdict(WidgetSummary.from_widget(widget)))

    def post(self, request, widget_id):
        form = WidgetEditForm(request.POST)
        if not form.is_valid():
            return _form_error(form)

        changes = form.changes()
        widget = self.service.update_widget(
            widget_id,
            title=changes.get("title"),
            zone=changes.get("zone"),
            position=changes.get("position"),
            layer_id=changes.get("layer_id"),
            zones=self.service.placement_zones() if "zone" in changes else None,
        )
        return JsonResponse(asdict(WidgetSummary.from_widget(widget)))


class DeleteWidgetView(WidgetsAdminView):
    def post(self, request, widget_id):
        self.service.delete_widget(widget_id)
        return JsonResponse({"deleted": True})


class AddLayerView(WidgetsAdminView):
    def get(self, request):
        hints = LayerHints(
            name=request.GET.get("name", "").strip(),
            description=request.GET.get("description", "").strip(),
            layer_rule=request.GET.get("layer_rule", "").strip(),
        )
        return JsonResponse(hints.to_dict())

    def post(self, request):
        form = LayerForm(request.POST)
        if not form.is_valid():
            return _form_error(form)
        layer = self.service.create_layer(**form.cleaned_data)
        return JsonResponse(asdict(LayerSummary.from_layer(layer)), status=201)


class LayerDetailView(WidgetsAdminView):
    def get(self, request, layer_id):
        layer = self.service.get_layer(layer_id)
        return JsonResponse(
            {
                **asdict(LayerSummary.from_layer(layer)),
                "widgets": [asdict(summary) for summary in summarize_widgets(self.service.get_widgets(layer.pk))],
            }
        )

    def post(self, request, layer_id):
        form = LayerForm(request.POST)
        if not form.is_valid():
            return _form_error(form)
        layer = self.service.update_layer(layer_id, **form.cleaned_data)
        return JsonResponse(asdict(LayerSummary.from_layer(layer)))


class DeleteLayerView(WidgetsAdminView):
    def post(self, request, layer_id):
        deleted = self.service.delete_layer(layer_id)
        return JsonResponse({"deleted": True, "widgets_deleted": deleted})
