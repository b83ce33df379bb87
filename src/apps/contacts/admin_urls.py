"""Admin contact management API URL configuration."""

from django.urls import path

from . import views

app_name = "admin_api"

urlpatterns = [
    path("contacts/", views.AdminContactListView.as_view(), name="contacts"),
    path("contacts/<str:contact_id>/", views.AdminContactDetailView.as_view(), name="contact_detail"),
    path("dashboard/", views.AdminDashboardView.as_view(), name="dashboard"),
]
