from django.apps import AppConfig


class BooksCoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "books_core"
    verbose_name = "Books"

    # ensure receivers are registered
    def ready(self):
        import books_core.signals  # noqa: F401
