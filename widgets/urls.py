from django.urls import path

from .views import (
    AddLayerView,
    AddWidgetView,
    ChooseWidgetView,
    DeleteLayerView,
    DeleteWidgetView,
    LayerDetailView,
    WidgetDetailView,
    WidgetIndexView,
)

app_name = "widgets"

urlpatterns = [
    path("", WidgetIndexView.as_view(), name="index"),
    path("choose/", ChooseWidgetView.as_view(), name="choose_widget"),
    path("widgets/add/", AddWidgetView.as_view(), name="add_widget"),
    path("widgets/<int:widget_id>/", WidgetDetailView.as_view(), name="edit_widget"),
    path("widgets/<int:widget_id>/delete/", DeleteWidgetView.as_view(), name="delete_widget"),
    path("layers/add/", AddLayerView.as_view(), name="add_layer"),
    path("layers/<int:layer_id>/", LayerDetailView.as_view(), name="edit_layer"),
    path("layers/<int:layer_id>/delete/", DeleteLayerView.as_view(), name="delete_layer"),
]
