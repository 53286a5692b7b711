"""
URL configuration for corporation API endpoints.
"""

from django.urls import path

from api.v1.corporations import views

app_name = "corporations"

urlpatterns = [
    path(
        "corporations",
        views.CorporationCollectionView.as_view(),
        name="corporations",
    ),
    path(
        "corporations/<str:code>",
        views.CorporationDetailView.as_view(),
        name="corporation-detail",
    ),
]
