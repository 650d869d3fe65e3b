from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Optional

from core.plugins import BaseWidget
from core.themes import ThemeDefinition

from .models import Layer, Widget
from .positions import parse_position


@dataclass
class ThemeSummary:
    slug: str
    label: str
    base_theme: Optional[str]

    @classmethod
    def from_theme(cls, theme: Optional[ThemeDefinition]) -> Optional["ThemeSummary"]:
        if theme is None:
            return None
        return cls(slug=theme.slug, label=theme.label, base_theme=theme.base_theme)


@dataclass
class LayerSummary:
    id: int
    name: str
    description: str
    layer_rule: str

    @classmethod
    def from_layer(cls, layer: Layer) -> "LayerSummary":
        return cls(
            id=layer.pk,
            name=layer.name,
            description=layer.description,
            layer_rule=layer.layer_rule,
        )


@dataclass
class WidgetSummary:
    id: int
    widget_type: str
    title: str
    zone: str
    position: str
    sort_position: int
    layer_id: Optional[int]
    config: dict = field(default_factory=dict)

    @classmethod
    def from_widget(cls, widget: Widget) -> "WidgetSummary":
        return cls(
            id=widget.pk,
            widget_type=widget.widget_type,
            title=widget.title,
            zone=widget.zone,
            position=widget.position,
            sort_position=parse_position(widget),
            layer_id=widget.layer_id,
            config=widget.config or {},
        )


@dataclass
class WidgetTypeSummary:
    slug: str
    label: str
    description: str

    @classmethod
    def from_type(cls, widget_cls: type[BaseWidget]) -> "WidgetTypeSummary":
        return cls(slug=widget_cls.slug, label=widget_cls.label, description=widget_cls.description)


def summarize_widgets(widgets) -> list[WidgetSummary]:
    """Widget summaries ordered by zone, then position."""
    summaries = [WidgetSummary.from_widget(widget) for widget in widgets]
    return sorted(summaries, key=lambda summary: (summary.zone, summary.sort_position))


@dataclass
class WidgetsIndex:
    current_theme: Optional[ThemeSummary]
    current_layer: LayerSummary
    layers: list[LayerSummary]
    widgets: list[WidgetSummary]
    zones: list[str]
    orphan_zones: list[str]
    orphan_widgets: list[WidgetSummary]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class WidgetChooser:
    current_layer: LayerSummary
    zone: str
    widget_types: list[WidgetTypeSummary]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class LayerHints:
    name: str = ""
    description: str = ""
    layer_rule: str = ""

    def to_dict(self) -> dict:
        return asdict(self)
