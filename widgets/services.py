"""Widget and layer management, including zone-relative widget placement.

Positions are string-encoded integers scoped to a zone. Moving a widget
copies a neighbour's position and then pushes the widgets at or after that
position forward (``make_room``) so that no two widgets in a zone share a
position.

Every public operation runs in a transaction and locks the rows of the zone
it touches, so concurrent placements in one zone are serialized by the
database. Rows are only ever locked a whole zone at a time, zones in name
order, and never a single widget first.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet

from core.plugins import BaseWidget, PluginRegistry, registry as default_registry
from core.themes import ThemeDefinition, all_zones, discover_themes, get_active_theme, resolve_theme_zones

from .exceptions import InvalidZone, LayerNotFound, PositionOutOfRange, UnknownWidgetType, WidgetNotFound
from .models import Layer, Widget
from .positions import INT32_MAX, format_position, parse_position, sort_by_position

logger = logging.getLogger(__name__)


class WidgetsService:
    def __init__(
        self,
        registry: Optional[PluginRegistry] = None,
        themes: Optional[Mapping[str, ThemeDefinition]] = None,
    ):
        self.registry = registry or default_registry
        self._themes = themes

    # -------------------------------------------------------------------------
    # Widget types, themes and zones
    # -------------------------------------------------------------------------

    def get_widget_types(self) -> list[tuple[str, str]]:
        return [(cls.slug, cls.description) for cls in self.registry.get_all_widget_types()]

    def get_widget_type_names(self) -> list[str]:
        return [slug for slug, _ in self.get_widget_types()]

    def get_widget_type(self, widget_type: str) -> type[BaseWidget]:
        cls = self.registry.get_widget_type(widget_type)
        if cls is None:
            raise UnknownWidgetType(widget_type)
        return cls

    @property
    def themes(self) -> Mapping[str, ThemeDefinition]:
        if self._themes is None:
            self._themes = discover_themes()
        return self._themes

    def get_current_theme(self) -> Optional[ThemeDefinition]:
        return get_active_theme(self.themes)

    def get_zones(self) -> list[str]:
        return all_zones(self.themes)

    def get_zones_for_theme(self, theme: Optional[ThemeDefinition]) -> list[str]:
        return resolve_theme_zones(theme, self.themes)

    def placement_zones(self) -> Optional[list[str]]:
        """Zones new widgets may use, or ``None`` when any zone is accepted."""
        if getattr(settings, "WIDGETS_ALLOW_ADHOC_ZONES", False):
            return None
        return self.get_zones()

    def validate_zone(self, zone: Optional[str], zones: Optional[Iterable[str]] = None) -> str:
        zone = (zone or "").strip()
        if not zone:
            raise InvalidZone(zone, "A zone is required for widget placement.")
        zones = list(zones or [])
        if zones and zone not in zones:
            raise InvalidZone(zone)
        return zone

    # -------------------------------------------------------------------------
    # Layers
    # -------------------------------------------------------------------------

    def get_layers(self) -> QuerySet[Layer]:
        return Layer.objects.all()

    def find_layer(self, layer_id) -> Optional[Layer]:
        if layer_id is None:
            return None
        return Layer.objects.filter(pk=layer_id).first()

    def get_layer(self, layer_id) -> Layer:
        layer = self.find_layer(layer_id)
        if layer is None:
            raise LayerNotFound(layer_id)
        return layer

    def create_layer(self, name: str, description: str = "", layer_rule: str = "") -> Layer:
        layer = Layer.objects.create(name=name, description=description, layer_rule=layer_rule)
        logger.info("Created layer %s (%s)", layer.pk, layer.name)
        return layer

    def update_layer(self, layer_id, *, name=None, description=None, layer_rule=None) -> Layer:
        layer = self.get_layer(layer_id)
        changes = {"name": name, "description": description, "layer_rule": layer_rule}
        update_fields = []
        for field_name, value in changes.items():
            if value is not None:
                setattr(layer, field_name, value)
                update_fields.append(field_name)
        if update_fields:
            layer.save(update_fields=[*update_fields, "updated_at"])
        return layer

    @transaction.atomic
    def delete_layer(self, layer_id) -> int:
        """Delete a layer together with every widget assigned to it.

        Returns the number of widgets deleted.
        """
        layer = self.get_layer(layer_id)
        zones = Widget.objects.filter(layer=layer).order_by("zone").values_list("zone", flat=True).distinct()
        for zone in zones:
            self._lock_zone(zone)
        deleted, _ = Widget.objects.filter(layer=layer).delete()
        layer.delete()
        logger.info("Deleted layer %s and %d widget(s)", layer_id, deleted)
        return deleted

    # -------------------------------------------------------------------------
    # Widgets
    # -------------------------------------------------------------------------

    def get_all_widgets(self) -> QuerySet[Widget]:
        return Widget.objects.select_related("layer")

    def get_widgets(self, layer_id=None) -> QuerySet[Widget]:
        widgets = self.get_all_widgets().filter(layer__isnull=False)
        if layer_id is not None:
            widgets = widgets.filter(layer_id=layer_id)
        return widgets

    def get_orphaned_widgets(self) -> QuerySet[Widget]:
        return self.get_all_widgets().filter(layer__isnull=True)

    def find_widget(self, widget_id) -> Optional[Widget]:
        if widget_id is None:
            return None
        return self.get_all_widgets().filter(pk=widget_id).first()

    def get_widget(self, widget_id) -> Widget:
        widget = self.find_widget(widget_id)
        if widget is None:
            raise WidgetNotFound(widget_id)
        return widget

    def next_position(self, zone: str) -> str:
        """Position that appends a widget to the end of ``zone``."""
        zone_widgets = list(Widget.objects.filter(zone=zone))
        highest = max((parse_position(widget) for widget in zone_widgets), default=0)
        position = max(len(zone_widgets), highest) + 1
        if position > INT32_MAX:
            raise PositionOutOfRange(zone, position)
        return format_position(position)

    @transaction.atomic
    def create_widget(
        self,
        layer_id,
        widget_type: str,
        *,
        zone: str,
        title: str = "",
        position: Optional[str] = None,
        config: Optional[dict] = None,
        zones: Optional[Iterable[str]] = None,
    ) -> Widget:
        layer = self.get_layer(layer_id)
        widget_cls = self.get_widget_type(widget_type)
        zone = self.validate_zone(zone, zones)
        self._lock_zone(zone)
        if position is None or not str(position).strip():
            position = self.next_position(zone)

        widget = Widget.objects.create(
            widget_type=widget_cls.slug,
            title=title,
            zone=zone,
            position=str(position).strip(),
            layer=layer,
            config={**widget_cls.default_config(), **(config or {})},
        )
        self.make_room(widget)
        logger.info("Created %s widget %s in zone %s at position %s", widget.widget_type, widget.pk, zone, widget.position)
        return widget

    @transaction.atomic
    def update_widget(
        self,
        widget_id,
        *,
        title: Optional[str] = None,
        zone: Optional[str] = None,
        position: Optional[str] = None,
        layer_id=None,
        config: Optional[dict] = None,
        zones: Optional[Iterable[str]] = None,
    ) -> Widget:
        if zone is not None:
            zone = self.validate_zone(zone, zones)
        widget, _ = self._lock_widget_zone(widget_id, also_lock=[zone] if zone is not None else ())

        update_fields = []
        if title is not None:
            widget.title = title
            update_fields.append("title")
        if zone is not None and zone != widget.zone:
            widget.zone = zone
            update_fields.append("zone")
        if position is not None and position != widget.position:
            widget.position = position
            update_fields.append("position")
        if layer_id is not None:
            widget.layer = self.get_layer(layer_id)
            update_fields.append("layer")
        if config is not None:
            widget.config = config
            update_fields.append("config")

        if update_fields:
            widget.save(update_fields=[*update_fields, "updated_at"])
        if "zone" in update_fields or "position" in update_fields:
            self.make_room(widget)
        return widget

    @transaction.atomic
    def delete_widget(self, widget_id) -> None:
        widget, _ = self._lock_widget_zone(widget_id)
        widget.delete()
        logger.info("Deleted widget %s from zone %s", widget_id, widget.zone)

    # -------------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------------

    @transaction.atomic
    def move_widget_up(self, widget_id) -> bool:
        """Move a widget one place towards the start of its zone.

        Returns False, without writing anything, when the widget is already
        first in its zone.
        """
        widget, zone_widgets = self._lock_widget_zone(widget_id)
        current = parse_position(widget)

        widget_before = next(
            (
                other
                for other in sort_by_position(zone_widgets, descending=True)
                if parse_position(other) < current
            ),
            None,
        )
        if widget_before is None:
            logger.debug("Widget %s is already first in zone %s", widget.pk, widget.zone)
            return False

        widget.position = widget_before.position
        widget.save(update_fields=["position", "updated_at"])
        self.make_room(widget)
        logger.debug("Moved widget %s up to position %s in zone %s", widget.pk, widget.position, widget.zone)
        return True

    @transaction.atomic
    def move_widget_down(self, widget_id) -> bool:
        """Move a widget one place towards the end of its zone.

        The following widget takes over this widget's position and room is
        made after it. Returns False, without writing anything, when the
        widget is already last in its zone.
        """
        widget, zone_widgets = self._lock_widget_zone(widget_id)
        current = parse_position(widget)

        widget_after = next(
            (
                other
                for other in sort_by_position(zone_widgets)
                if parse_position(other) > current
            ),
            None,
        )
        if widget_after is None:
            logger.debug("Widget %s is already last in zone %s", widget.pk, widget.zone)
            return False

        widget_after.position = widget.position
        widget_after.save(update_fields=["position", "updated_at"])
        self.make_room(widget_after)
        logger.debug("Moved widget %s down in zone %s", widget.pk, widget.zone)
        return True

    @transaction.atomic
    def move_widget_to_layer(self, widget_id, layer_id=None) -> bool:
        """Assign a widget to ``layer_id``, or to the first layer when omitted.

        Returns False when the layer does not exist. Zone and position are
        left alone.
        """
        widget, _ = self._lock_widget_zone(widget_id)
        if layer_id is None:
            layer = self.get_layers().first()
        else:
            layer = self.find_layer(layer_id)
        if layer is None:
            logger.info("Cannot move widget %s: layer %s not found", widget.pk, layer_id)
            return False

        widget.layer = layer
        widget.save(update_fields=["layer", "updated_at"])
        logger.debug("Moved widget %s to layer %s", widget.pk, layer.pk)
        return True

    @transaction.atomic
    def make_room_for_widget_position(self, widget_id) -> int:
        widget, _ = self._lock_widget_zone(widget_id)
        return self.make_room(widget)

    @transaction.atomic
    def make_room(self, widget: Widget) -> int:
        """Push widgets colliding with ``widget``'s position further down its zone.

        Every other widget in the zone at or after the target position is
        renumbered to the integers right after it, keeping their relative
        order. Nothing is written unless some widget shares the target
        position. Returns the number of widgets renumbered.

        Raises ``PositionOutOfRange``, before writing anything, when the
        renumbered positions would not fit in a signed 32-bit integer.
        """
        target = parse_position(widget)
        widgets_to_move = sort_by_position(
            other
            for other in self._lock_zone(widget.zone)
            if other.pk != widget.pk and parse_position(other) >= target
        )

        if not widgets_to_move or parse_position(widgets_to_move[0]) > target:
            return 0

        if target + len(widgets_to_move) > INT32_MAX:
            logger.warning(
                "Cannot renumber %d widget(s) after position %s in zone %s: out of range",
                len(widgets_to_move),
                target,
                widget.zone,
            )
            raise PositionOutOfRange(widget.zone, target + len(widgets_to_move))

        position = target
        for other in widgets_to_move:
            position += 1
            other.position = format_position(position)
            other.save(update_fields=["position", "updated_at"])
        logger.debug(
            "Renumbered %d widget(s) in zone %s after position %s",
            len(widgets_to_move),
            widget.zone,
            target,
        )
        return len(widgets_to_move)

    def _lock_widget_zone(self, widget_id, also_lock: Iterable[str] = ()) -> tuple[Widget, list[Widget]]:
        """Lock the zone holding ``widget_id`` and return the widget with its zone's rows.

        Zones are locked in name order, whole zone at a time, and the widget
        is taken from the locked rows. If the widget left its zone between
        reading the zone and locking it, the lookup starts over.
        """
        while True:
            row = Widget.objects.filter(pk=widget_id).values_list("pk", "zone").first()
            if row is None:
                raise WidgetNotFound(widget_id)
            pk, zone = row
            locked = {name: self._lock_zone(name) for name in sorted({zone, *also_lock})}
            widget = next((other for other in locked[zone] if other.pk == pk), None)
            if widget is not None:
                return widget, locked[zone]
            logger.debug("Widget %s left zone %s before it was locked, retrying", pk, zone)

    def _lock_zone(self, zone: str) -> list[Widget]:
        return list(Widget.objects.select_for_update().filter(zone=zone).order_by("pk"))
