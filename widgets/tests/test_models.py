from django.test import TestCase

from widgets.models import Layer, Widget


class LayerModelTests(TestCase):
    def test_str_returns_name(self):
        self.assertEqual(str(Layer(name="Default")), "Default")

    def test_deleting_layer_row_orphans_widgets(self):
        layer = Layer.objects.create(name="Default")
        widget = Widget.objects.create(widget_type="text", zone="Header", position="1", layer=layer)
        layer.delete()
        widget.refresh_from_db()
        self.assertTrue(widget.is_orphaned)


class WidgetModelTests(TestCase):
    def test_str_format(self):
        widget = Widget(widget_type="text", zone="Footer", position="3")
        self.assertEqual(str(widget), "text in Footer (position=3)")

    def test_defaults(self):
        widget = Widget.objects.create(widget_type="text", zone="Footer")
        self.assertEqual(widget.position, "")
        self.assertEqual(widget.config, {})
        self.assertTrue(widget.is_orphaned)

    def test_default_ordering_by_id(self):
        older = Widget.objects.create(widget_type="text", zone="Footer", position="1")
        newer = Widget.objects.create(widget_type="text", zone="Footer", position="2")
        self.assertEqual(list(Widget.objects.all()), [older, newer])
