"""Public contact intake URL configuration."""

from django.urls import path

from . import views

app_name = "contacts"

urlpatterns = [
    path("", views.ContactSubmitView.as_view(), name="submit"),
]
