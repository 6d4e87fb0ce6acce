from django.urls import path

from .views import (
    PracticalDocumentView,
    PracticalDocumentDownloadView,
    PracticalPreviewView,
)

urlpatterns = [
    path(
        "practicals/document/",
        PracticalDocumentView.as_view(),
        name="practicals-document",
    ),
    path(
        "practicals/document/download/",
        PracticalDocumentDownloadView.as_view(),
        name="practicals-document-download",
    ),
    path(
        "practicals/preview/",
        PracticalPreviewView.as_view(),
        name="practicals-preview",
    ),
]
