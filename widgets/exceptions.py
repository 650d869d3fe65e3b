class WidgetsError(Exception):
    """Base class for widget placement errors."""


class NotFound(WidgetsError, LookupError):
    kind = "record"

    def __init__(self, record_id):
        self.record_id = record_id
        super().__init__(f"{self.kind.capitalize()} not found: {record_id}")


class WidgetNotFound(NotFound):
    kind = "widget"


class LayerNotFound(NotFound):
    kind = "layer"


class InvalidZone(WidgetsError, ValueError):
    def __init__(self, zone, message=None):
        self.zone = zone
        super().__init__(message or f"Unknown zone: {zone!r}")


class UnknownWidgetType(WidgetsError, ValueError):
    def __init__(self, widget_type):
        self.widget_type = widget_type
        super().__init__(f"Unknown widget type: {widget_type!r}")


class PositionOutOfRange(WidgetsError, ValueError):
    def __init__(self, zone, position):
        self.zone = zone
        self.position = position
        super().__init__(f"Position {position} in zone {zone!r} is out of range")
