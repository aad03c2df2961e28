import logging

from django.conf import settings

from apps.utils.exceptions import ShopError
from .services import CatalogService

logger = logging.getLogger(__name__)


def seed_catalog_after_migrate(sender, using="default", **kwargs):
    """
    Seed the products table right after `migrate` when it is still empty.
    Opt-in via CATALOG_SEED_ON_MIGRATE.
    """
    if not getattr(settings, "CATALOG_SEED_ON_MIGRATE", False):
        return

    try:
        CatalogService.seed_from_file(settings.CATALOG_SEED_FILE)
    except ShopError as e:
        # A bad seed file must not abort the migration run
        logger.error(f"Catalog seed after migrate failed: {e.message}")
