from django.urls import path
from . import views

app_name = "placement"

urlpatterns = [
    # Petit point de santé (pratique pour Nginx / monitoring)
    path("sante", views.sante, name="sante"),

    # Import CSV et validation d'un plan sauvegardé
    path("import", views.importer_csv, name="import"),
    path("load", views.charger_plan, name="load"),

    # Édition + recalcul en tâche de fond (Celery)
    path("edit/start", views.edition_start, name="edit_start"),
    path("edit/status/<str:task_id>", views.edition_status, name="edit_status"),

    # Exports
    path("export", views.export_plan, name="export"),
    path("download/<str:token>/<str:fmt>", views.download_artifact, name="download"),
]
