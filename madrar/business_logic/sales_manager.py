# madrar/business_logic/sales_manager.py
from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from madrar.business_logic.entities.sale_record_entity import SaleRecordEntity
from madrar.business_logic.inventory_manager import InventoryManager
from madrar.business_logic.person_manager import PersonManager
from madrar.data_access.products_repository import ProductsRepository
from madrar.data_access.sales_records_repository import SalesRecordsRepository
from madrar.constants import (
    PaymentMethod, PaymentStatus, PersonType, SaleStage, StockMovementType, ReferenceType
)
from madrar.errors import InsufficientStockError, LedgerPostingFailed, MadrarError, NotFoundError, ValidationError
from madrar.utils.date_converter import now, parse_date, parse_datetime
from madrar.utils.number_utils import (
    quantize_money, to_enum, to_non_negative_decimal, to_positive_decimal, to_whole_units
)

logger = logging.getLogger(__name__)


class SalesManager:
    def __init__(self,
                 sales_repository: SalesRecordsRepository,
                 products_repository: ProductsRepository,
                 inventory_manager: InventoryManager,
                 person_manager: PersonManager):
        if sales_repository is None: raise ValueError("sales_repository cannot be None")
        if products_repository is None: raise ValueError("products_repository cannot be None")
        if inventory_manager is None: raise ValueError("inventory_manager cannot be None")
        if person_manager is None: raise ValueError("person_manager cannot be None")

        self.sales_repo = sales_repository
        self.products_repo = products_repository
        self.inventory_manager = inventory_manager
        self.person_manager = person_manager
        self.db_manager = sales_repository.db_manager
        self.last_stage: Optional[SaleStage] = None

    def _validate_sale_input(self, customer_name: str, quantity: Any, sale_price: Any,
                             amount_paid: Any, payment_method: Any):
        if not customer_name or not str(customer_name).strip():
            raise ValidationError("Customer name is required.", "validation.customer_name_required")
        quantity = to_whole_units(quantity, "quantity")
        sale_price = to_positive_decimal(sale_price, "sale_price", "validation.price_positive")
        if amount_paid is not None and amount_paid != "":
            amount_paid = to_non_negative_decimal(amount_paid, "amount_paid")
        else:
            amount_paid = None
        payment_method = to_enum(PaymentMethod, payment_method, "payment_method") \
            if payment_method is not None else PaymentMethod.CASH
        return str(customer_name).strip(), quantity, sale_price, amount_paid, payment_method

    def record_sale(self,
                    product_id: str,
                    quantity: Any,
                    customer_name: str,
                    sale_price: Any,
                    amount_paid: Any = None,
                    payment_method: Any = None,
                    customer_id: Optional[str] = None,
                    sale_date: Optional[datetime] = None,
                    notes: Optional[str] = None) -> SaleRecordEntity:
        """
        Records a sale and decrements product stock in one store transaction.

        ``amount_paid`` defaults to the full total when not given; an explicit 0
        means nothing was paid. If a customer is linked and the sale is not fully
        paid, the remainder is posted to the customer's ledger after the sale
        commits; a failure there is reported on ``sale.ledger_warning`` and does
        not undo the sale.
        """
        logger.info(f"Attempting to record sale of {quantity} x product ID {product_id} to '{customer_name}'.")
        stage = SaleStage.VALIDATING
        self.last_stage = stage
        try:
            customer_name, quantity, sale_price, amount_paid, payment_method = self._validate_sale_input(
                customer_name, quantity, sale_price, amount_paid, payment_method)
            sale_date = parse_datetime(sale_date, "sale_date") or now()

            with self.db_manager.transaction():
                product = self.products_repo.get_by_id(product_id)
                if product is None:
                    raise NotFoundError("Product", product_id)
                if customer_id:
                    self.person_manager.require_person(customer_id, PersonType.CUSTOMER)
                if product.current_stock < quantity:
                    raise InsufficientStockError(product.name, product.current_stock, quantity)

                total_amount = quantize_money(quantity * sale_price)
                amount_paid = quantize_money(total_amount if amount_paid is None else amount_paid)
                payment_status = PaymentStatus.PAID if amount_paid >= total_amount else PaymentStatus.PARTIAL

                stage = SaleStage.RECORDING
                sale = self.sales_repo.add(SaleRecordEntity(
                    product_id=product_id,
                    quantity=quantity,
                    customer_name=customer_name,
                    sale_price=sale_price,
                    total_amount=total_amount,
                    amount_paid=amount_paid,
                    payment_status=payment_status,
                    payment_method=payment_method,
                    sale_date=sale_date,
                    customer_id=customer_id or None,
                    notes=notes,
                ))

                stage = SaleStage.ADJUSTING
                self.inventory_manager.adjust_product_stock(
                    product_id, -quantity,
                    movement_type=StockMovementType.SALE,
                    reference_type=ReferenceType.SALE_RECORD,
                    reference_id=sale.id,
                    require_available=True)
        except MadrarError as e:
            e.stage = stage
            self.last_stage = SaleStage.FAILED
            logger.warning(f"Sale of product ID {product_id} failed during {stage.value}: {e}")
            raise
        except Exception:
            self.last_stage = SaleStage.FAILED
            logger.error(f"Unexpected error during sale of product ID {product_id} at {stage.value}.", exc_info=True)
            raise

        sale.product_name = product.name
        logger.info(f"Sale {sale.id} recorded: {quantity} x '{product.name}' for {total_amount} "
                    f"({payment_status.value}).")

        if sale.customer_id and sale.amount_paid < sale.total_amount:
            self.last_stage = SaleStage.LEDGER_POSTING
            self._post_unpaid_balance(sale)

        self.last_stage = SaleStage.COMPLETE
        return sale

    def _post_unpaid_balance(self, sale: SaleRecordEntity) -> None:
        remaining = sale.total_amount - sale.amount_paid
        try:
            self.person_manager.record_sale_charge(
                sale.customer_id, remaining, sale.id,
                description=f"Unpaid balance of sale {sale.id}")
        except MadrarError as e:
            logger.error(f"Sale {sale.id} committed but posting {remaining} to customer "
                         f"'{sale.customer_name}' failed: {e}", exc_info=True)
            sale.ledger_warning = LedgerPostingFailed(sale.id, sale.customer_name, remaining)

    def get_sales_records(self) -> List[SaleRecordEntity]:
        sales = self.sales_repo.get_all_recent()
        names: Dict[str, Optional[str]] = {}
        for sale in sales:
            if sale.product_id not in names:
                product = self.products_repo.get_by_id(sale.product_id)
                names[sale.product_id] = product.name if product else None
            sale.product_name = names[sale.product_id]
        return sales

    def get_sale_by_id(self, sale_id: str) -> Optional[SaleRecordEntity]:
        return self.sales_repo.get_by_id(sale_id)

    def get_total_sales(self) -> Decimal:
        return sum((sale.total_amount for sale in self.sales_repo.get_all()), Decimal("0"))

    def _sales_on(self, day: Any) -> List[SaleRecordEntity]:
        day = parse_date(day, "day") if day is not None else date.today()
        start = datetime.combine(day, datetime.min.time())
        return self.sales_repo.get_by_date_range(start, start + timedelta(days=1))

    def get_sales_total_for_date(self, day: Any = None) -> Decimal:
        return sum((sale.total_amount for sale in self._sales_on(day)), Decimal("0"))

    def get_sales_count_for_date(self, day: Any = None) -> int:
        return len(self._sales_on(day))

    def get_best_selling_product(self) -> Optional[Dict[str, Any]]:
        """The product with the highest total quantity sold, or None before the first sale."""
        totals: Dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
        for sale in self.sales_repo.get_all(order_by="created_at, rowid"):
            totals[sale.product_id] += sale.quantity
        if not totals:
            return None

        product_id = max(totals, key=lambda pid: totals[pid])
        product = self.products_repo.get_by_id(product_id)
        return {
            "product_id": product_id,
            "product_name": product.name if product else None,
            "product": product,
            "total_quantity": totals[product_id],
        }
