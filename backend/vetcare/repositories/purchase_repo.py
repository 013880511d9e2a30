"""Read-only repository over completed sales and their line items."""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from vetcare.core.exceptions import StoreError
from vetcare.db.base import Sale as DbSale
from vetcare.db.base import SaleItem as DbSaleItem
from vetcare.domain.entities import Purchase, PurchaseItem
from vetcare.domain.interfaces import IPurchaseReader

logger = logging.getLogger(__name__)


class PurchaseRepository(IPurchaseReader):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def _base_query(self):
        return self.db.query(DbSale).options(
            selectinload(DbSale.items).joinedload(DbSaleItem.product)
        )

    def get_by_id(self, purchase_id: str) -> Optional[Purchase]:
        try:
            db_sale = self._base_query().filter(DbSale.id == purchase_id).first()
        except SQLAlchemyError as e:
            logger.error(
                "Purchase lookup failed",
                extra={"context": {"purchase_id": purchase_id, "error": str(e)}},
            )
            raise StoreError() from e
        return self._to_domain(db_sale) if db_sale else None

    def list_by_customer(self, customer_id: str) -> List[Purchase]:
        try:
            rows = (
                self._base_query()
                .filter(DbSale.customer_id == customer_id)
                .order_by(DbSale.created_at.desc(), DbSale.id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(
                "Purchase listing failed",
                extra={"context": {"customer_id": customer_id, "error": str(e)}},
            )
            raise StoreError() from e
        return [self._to_domain(row) for row in rows]

    def _to_domain(self, db_sale: DbSale) -> Purchase:
        items = [
            PurchaseItem(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=Decimal(str(item.unit_price)),
                subtotal=Decimal(str(item.subtotal)),
                product_name=item.product.name if item.product else None,
                product_sku=item.product.sku if item.product else None,
            )
            for item in db_sale.items
        ]
        return Purchase(
            id=db_sale.id,
            customer_id=db_sale.customer_id,
            total=Decimal(str(db_sale.total)),
            status_value=db_sale.payment_status,
            created_at=db_sale.created_at,
            items=items,
        )
