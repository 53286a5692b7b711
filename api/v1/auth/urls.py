"""
URL configuration for the app authentication endpoint.
"""

from django.urls import path

from api.v1.auth import views

app_name = "auth"

urlpatterns = [
    path("auth", views.AuthenticateAppView.as_view(), name="authenticate"),
]
