import logging
from django.db import transaction, DatabaseError

from apps.utils.exceptions import StorageError, ValidationError
from .models import SellerApplication

logger = logging.getLogger(__name__)


class SellerService:

    @staticmethod
    def submit(boutique_name: str, trade_license: str, description: str) -> SellerApplication:
        if not (boutique_name and trade_license and description):
            raise ValidationError("All fields are required")

        try:
            with transaction.atomic():
                application = SellerApplication.objects.create(
                    boutique_name=boutique_name,
                    trade_license=trade_license,
                    description=description,
                )
        except DatabaseError as e:
            logger.error(f"Seller application insert failed: {e}")
            raise StorageError("Could not submit application.") from e

        logger.info(f"Seller application {application.id} received from {boutique_name}", extra={"application_id": application.id})
        return application
