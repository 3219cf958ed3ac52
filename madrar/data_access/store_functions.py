# madrar/data_access/store_functions.py
"""
Aggregate operations the application reaches by name through ``call``
rather than through a single collection. They run against the same
SQLite database as the repositories.
"""

import hmac
import logging
from collections import Counter, defaultdict
from datetime import timedelta
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from madrar import config
from madrar.constants import (
    BUSINESS_TABLES, PersonType,
    STORE_FUNCTION_CUSTOMER_ANALYTICS, STORE_FUNCTION_RESET_USER_DATA,
    PREDICTION_HIGH_CONFIDENCE_ORDERS, PREDICTION_MEDIUM_CONFIDENCE_ORDERS,
)
from madrar.data_access.database_manager import DatabaseManager
from madrar.data_access.persons_repository import PersonsRepository
from madrar.data_access.products_repository import ProductsRepository
from madrar.data_access.sales_records_repository import SalesRecordsRepository
from madrar.errors import StoreError

logger = logging.getLogger(__name__)

MOST_ACTIVE_DAYS_LIMIT = 3
MOST_PURCHASED_PRODUCTS_LIMIT = 5


class StoreFunctions:
    def __init__(self, db_manager: DatabaseManager,
                 persons_repository: PersonsRepository,
                 products_repository: ProductsRepository,
                 sales_repository: SalesRecordsRepository,
                 admin_password: Optional[str] = None):
        if db_manager is None:
            raise ValueError("db_manager cannot be None.")
        if persons_repository is None:
            raise ValueError("persons_repository cannot be None.")
        if products_repository is None:
            raise ValueError("products_repository cannot be None.")
        if sales_repository is None:
            raise ValueError("sales_repository cannot be None.")

        self.db_manager = db_manager
        self.persons_repository = persons_repository
        self.products_repository = products_repository
        self.sales_repository = sales_repository
        self._admin_password = admin_password if admin_password is not None else config.ADMIN_RESET_PASSWORD
        self._functions: Dict[str, Callable[..., Dict[str, Any]]] = {
            STORE_FUNCTION_CUSTOMER_ANALYTICS: self._get_customer_analytics,
            STORE_FUNCTION_RESET_USER_DATA: self._reset_user_data,
        }

    def call(self, function_name: str, **args: Any) -> Dict[str, Any]:
        function = self._functions.get(function_name)
        if function is None:
            raise StoreError(f"Unknown store function '{function_name}'.")
        logger.debug(f"Calling store function '{function_name}'.")
        try:
            return function(**args)
        except TypeError as e:
            raise StoreError(f"Bad arguments for store function '{function_name}': {e}") from e

    def _get_customer_analytics(self, customer_uuid: str) -> Dict[str, Any]:
        customer = self.persons_repository.get_by_id(customer_uuid)
        if customer is None or customer.person_type != PersonType.CUSTOMER:
            return {"error": "Customer not found"}

        sales = self.sales_repository.get_by_customer_id(customer_uuid)

        day_counts = Counter(sale.sale_date.strftime("%A") for sale in sales)
        most_active_days = [day for day, _ in sorted(day_counts.items(), key=lambda item: (-item[1], item[0]))]

        per_product: Dict[str, Dict[str, Any]] = defaultdict(
            lambda: {"total_quantity": Decimal("0"), "total_amount": Decimal("0"), "purchase_count": 0})
        for sale in sales:
            stats = per_product[sale.product_id]
            stats["total_quantity"] += sale.quantity
            stats["total_amount"] += sale.total_amount
            stats["purchase_count"] += 1

        most_purchased = []
        for product_id, stats in sorted(per_product.items(), key=lambda item: -item[1]["total_quantity"]):
            product = self.products_repository.get_by_id(product_id)
            most_purchased.append({
                "product_name": product.name if product else product_id,
                "product_name_ar": product.display_name("ar") if product else product_id,
                **stats,
            })

        return {
            "most_active_days": most_active_days[:MOST_ACTIVE_DAYS_LIMIT],
            "most_purchased_products": most_purchased[:MOST_PURCHASED_PRODUCTS_LIMIT],
            "next_order_prediction": self._predict_next_order(sales),
            "total_purchases": len(sales),
            "total_spent": sum((sale.total_amount for sale in sales), Decimal("0")),
        }

    @staticmethod
    def _predict_next_order(sales) -> Dict[str, Any]:
        order_count = len(sales)
        if order_count >= PREDICTION_HIGH_CONFIDENCE_ORDERS:
            confidence = "High"
        elif order_count >= PREDICTION_MEDIUM_CONFIDENCE_ORDERS:
            confidence = "Medium"
        else:
            confidence = "Low"

        order_dates = sorted(sale.sale_date for sale in sales)
        if len(order_dates) < 2:
            return {"predicted_date": None, "confidence": confidence, "avg_days_between_orders": None}

        gaps = [(later - earlier).total_seconds() / 86400 for earlier, later in zip(order_dates, order_dates[1:])]
        avg_days = round(sum(gaps) / len(gaps), 1)
        predicted = order_dates[-1] + timedelta(days=round(avg_days))
        return {
            "predicted_date": predicted.date(),
            "confidence": confidence,
            "avg_days_between_orders": avg_days,
        }

    def _reset_user_data(self, admin_password: str) -> Dict[str, Any]:
        if not hmac.compare_digest(str(admin_password or "").encode("utf-8"),
                                   str(self._admin_password).encode("utf-8")):
            logger.warning("Data reset rejected: invalid admin password.")
            return {"success": False, "message": "Invalid admin password"}

        with self.db_manager.transaction() as conn:
            for table in BUSINESS_TABLES:
                conn.execute(f"DELETE FROM {table}")
        logger.info("All business data deleted.")
        return {"success": True, "message": "All data has been reset successfully"}
