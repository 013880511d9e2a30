"""Purchase history for the authenticated customer."""

import logging
from typing import List, Optional

from vetcare.core.exceptions import FeatureUnavailableError, NotFoundError
from vetcare.domain.entities import Purchase
from vetcare.domain.interfaces import IPurchaseReader

logger = logging.getLogger(__name__)


class PurchaseService:
    def __init__(self, purchase_repo: IPurchaseReader):
        self.purchase_repo = purchase_repo

    def list_purchases(self, customer_id: Optional[str]) -> List[Purchase]:
        """Newest-first purchases; nobody signed in means an empty history."""
        if not customer_id:
            logger.debug("Purchase history requested without a customer")
            return []
        return self.purchase_repo.list_by_customer(customer_id)

    def generate_invoice(self, purchase_id: str, customer_id: Optional[str]):
        """Invoice placeholder; only the purchase's own customer may ask for it.

        Raises:
            NotFoundError: unknown purchase, or one owned by someone else
            FeatureUnavailableError: otherwise
        """
        purchase = self.purchase_repo.get_by_id(purchase_id)
        if purchase is None or not customer_id or purchase.customer_id != customer_id:
            raise NotFoundError("Purchase", purchase_id)
        raise FeatureUnavailableError(
            "invoice", "Invoice generation is not available yet"
        )
