from django.apps import AppConfig


class DocumentsCoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "documents_core"

    # ensure receivers are registered
    def ready(self):
        import documents_core.signals  # noqa: F401
