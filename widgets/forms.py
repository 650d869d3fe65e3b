from django import forms

from core.plugins import registry


class LayerForm(forms.Form):
    name = forms.CharField(max_length=255)
    description = forms.CharField(required=False)
    layer_rule = forms.CharField(max_length=1024, required=False)

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if not name:
            raise forms.ValidationError("Layer name cannot be blank.")
        return name


class WidgetCreateForm(forms.Form):
    layer_id = forms.IntegerField(min_value=1)
    widget_type = forms.ChoiceField()
    zone = forms.CharField(max_length=64)
    title = forms.CharField(max_length=255, required=False)
    position = forms.CharField(max_length=32, required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["widget_type"].choices = registry.widget_choices()


class WidgetEditForm(forms.Form):
    title = forms.CharField(max_length=255, required=False)
    zone = forms.CharField(max_length=64, required=False)
    position = forms.CharField(max_length=32, required=False)
    layer_id = forms.IntegerField(min_value=1, required=False)

    def changes(self) -> dict:
        """Fields the request actually carried. Only the title may be cleared."""
        changes = {}
        for name in self.fields:
            if name not in self.data:
                continue
            value = self.cleaned_data.get(name)
            if name != "title" and value in (None, ""):
                continue
            changes[name] = value
        return changes


class WidgetActionForm(forms.Form):
    widget_id = forms.IntegerField(min_value=1)
    layer_id = forms.IntegerField(min_value=1, required=False)
    move_up = forms.CharField(required=False)
    move_down = forms.CharField(required=False)
    move_here = forms.CharField(required=False)
    move_out = forms.CharField(required=False)

    ACTIONS = ("move_out", "move_up", "move_down", "move_here")

    def action(self) -> str:
        for name in self.ACTIONS:
            if self.cleaned_data.get(name, "").strip():
                return name
        return ""


class ChooseWidgetForm(forms.Form):
    layer = forms.IntegerField(min_value=1)
    zone = forms.CharField(max_length=64)
