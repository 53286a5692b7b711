"""
URL configuration for client API endpoints.
"""

from django.urls import path

from api.v1.client import views

app_name = "client"

urlpatterns = [
    path("client", views.ClientStatusView.as_view(), name="client-status"),
    path("client/demo", views.GrantDemoView.as_view(), name="grant-demo"),
    path("client/link", views.LinkClientView.as_view(), name="link-client"),
    path("client/unlink", views.UnlinkClientView.as_view(), name="unlink-client"),
    path("client/token", views.IssueClientTokenView.as_view(), name="issue-token"),
]
