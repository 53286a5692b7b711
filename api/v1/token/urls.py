"""
URL configuration for token-authenticated client endpoints.
"""

from django.urls import path

from api.v1.token import views

app_name = "token"

urlpatterns = [
    path("token/client", views.TokenClientView.as_view(), name="token-client"),
]
