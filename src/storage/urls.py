from django.urls import path

from storage import views

app_name = "storage"

urlpatterns = [
    path("upload", views.UploadView.as_view(), name="upload"),
    path("download", views.DownloadView.as_view(), name="download"),
]
