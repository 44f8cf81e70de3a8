from django.urls import path

from . import views

app_name = "slips"

urlpatterns = [
    path("<str:slip_type>/", views.slip_list, name="list"),
    path("<str:slip_type>/<int:pk>/status/", views.slip_status, name="status"),
]
