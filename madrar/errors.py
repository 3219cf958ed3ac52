# madrar/errors.py
"""Error taxonomy shared by the data access and business logic layers.

Every error carries a ``message_key`` and ``params`` so that
``madrar.utils.messages.localize_error`` can render it in the active
display language.
"""

from typing import Any, Dict, List, Optional


class MadrarError(Exception):
    """Base class for every error raised by the inventory core."""

    message_key = "error.generic"

    def __init__(self, message: str, message_key: Optional[str] = None, **params: Any):
        super().__init__(message)
        if message_key:
            self.message_key = message_key
        self.params: Dict[str, Any] = params
        self.stage = None  # set by the transaction managers when a step fails


class NotFoundError(MadrarError):
    """Raised when a referenced material, product, person or record does not exist."""

    message_key = "error.not_found"

    def __init__(self, entity_name: str, entity_id: Any):
        super().__init__(f"{entity_name} with ID {entity_id} not found.",
                         entity=entity_name, entity_id=entity_id)
        self.entity_name = entity_name
        self.entity_id = entity_id


class NoRecipeError(MadrarError):
    """Raised when a product has no bill of materials configured."""

    message_key = "error.no_recipe"

    def __init__(self, product_id: Any, product_name: Optional[str] = None):
        super().__init__(f"No recipe configured for product {product_name or product_id}.",
                         product_id=product_id, product=product_name or str(product_id))
        self.product_id = product_id


class InsufficientStockError(MadrarError):
    """Raised when the requested quantity exceeds the stock at validation time."""

    message_key = "error.insufficient_stock"

    def __init__(self, item_name: str, available: Any, requested: Any,
                 shortages: Optional[List[Dict[str, Any]]] = None):
        super().__init__(f"Insufficient stock for {item_name}: {available} available, {requested} requested.",
                         item=item_name, available=available, requested=requested)
        self.item_name = item_name
        self.available = available
        self.requested = requested
        self.shortages = shortages or []


class ValidationError(MadrarError, ValueError):
    """Raised for missing or malformed input before anything is written."""

    message_key = "error.validation"

    def __init__(self, message: str, message_key: Optional[str] = None, **params: Any):
        super().__init__(message, message_key=message_key, **params)


class LedgerPostingFailed(MadrarError):
    """Non-fatal: the primary operation committed but its ledger entry was not posted."""

    message_key = "warning.ledger_posting_failed"

    def __init__(self, sale_id: Any, customer_name: str, amount: Any):
        super().__init__(f"Sale {sale_id} recorded, but the balance of {amount} for {customer_name} was not posted.",
                         sale_id=sale_id, customer=customer_name, amount=amount)
        self.sale_id = sale_id


class StoreError(MadrarError):
    """Raised when an underlying store call fails."""

    message_key = "error.store"
