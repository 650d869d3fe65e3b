from django.urls import path, include

urlpatterns = [
    path('manage/widgets/', include('widgets.urls')),
]
