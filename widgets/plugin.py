from core.plugins import BasePlugin


class WidgetsPlugin(BasePlugin):
    name = "widgets"
    label = "Widgets"
    description = "Widgets placed in theme zones and grouped into layers."

    def get_widget_types(self):
        from .widget_types import TextWidget, LinkListWidget, ImageWidget
        return [TextWidget, LinkListWidget, ImageWidget]
