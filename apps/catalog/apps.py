from django.apps import AppConfig


class CatalogConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.catalog"

    def ready(self):
        from django.db.models.signals import post_migrate
        from .receivers import seed_catalog_after_migrate

        post_migrate.connect(seed_catalog_after_migrate, sender=self)
