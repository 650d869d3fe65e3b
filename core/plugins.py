from __future__ import annotations


class BaseWidget:
    """A widget type contributed by a plugin.

    Subclasses only describe the type; instances are stored as
    ``widgets.Widget`` rows whose ``widget_type`` matches ``slug``.
    """

    slug: str = ""
    label: str = ""
    description: str = ""
    config_schema: dict = {}

    @classmethod
    def default_config(cls) -> dict:
        fields = cls.config_schema.get("fields", {})
        return {
            name: field["default"]
            for name, field in fields.items()
            if "default" in field
        }


class BasePlugin:
    name: str = ""
    label: str = ""
    version: str = "1.0.0"
    description: str = ""

    def get_widget_types(self) -> list[type[BaseWidget]]:
        return []


class PluginRegistry:
    def __init__(self):
        self._plugins: dict[str, BasePlugin] = {}

    def register(self, plugin: BasePlugin) -> None:
        self._plugins[plugin.name] = plugin

    def all_plugins(self) -> list[BasePlugin]:
        return list(self._plugins.values())

    def get_plugin(self, name: str) -> BasePlugin | None:
        return self._plugins.get(name)

    def get_all_widget_types(self) -> list[type[BaseWidget]]:
        types = []
        for plugin in self._plugins.values():
            types.extend(plugin.get_widget_types())
        return types

    def get_widget_type(self, slug: str) -> type[BaseWidget] | None:
        for cls in self.get_all_widget_types():
            if cls.slug == slug:
                return cls
        return None

    def widget_choices(self) -> list[tuple[str, str]]:
        return [(cls.slug, cls.label) for cls in self.get_all_widget_types()]


registry = PluginRegistry()
