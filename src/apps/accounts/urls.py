"""Admin authentication API URL configuration."""

from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    path("login/", views.LoginView.as_view(), name="login"),
    path("verify-token/", views.VerifyTokenView.as_view(), name="verify_token"),
]
