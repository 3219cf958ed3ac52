# madrar/constants.py

from enum import Enum

# General
DATE_FORMAT = "%Y-%m-%d"


class Language(Enum):
    ENGLISH = "en"
    ARABIC = "ar"


class MaterialUnit(Enum):
    KILOGRAM = "kg"
    GRAM = "grams"
    LITER = "liters"
    PIECE = "pieces"
    SACK = "sacks"


class ProductSize(Enum):
    SIZE_100G = "100g"
    SIZE_250G = "250g"
    SIZE_500G = "500g"
    SIZE_1KG = "1kg"
    SIZE_2KG = "2kg"


class PaymentMethod(Enum):
    CASH = "cash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    CREDIT = "credit"


class PaymentStatus(Enum):
    PAID = "paid"
    PARTIAL = "partial"


class PersonType(Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class CustomerTransactionType(Enum):
    SALE = "sale"          # amount the customer owes us
    PAYMENT = "payment"    # amount the customer paid back


class SupplierTransactionType(Enum):
    PURCHASE = "purchase"  # amount we owe the supplier
    PAYMENT = "payment"    # amount we paid the supplier


class StockMovementType(Enum):
    RECEIPT = "receipt"
    PRODUCTION_CONSUMPTION = "production_consumption"
    PRODUCTION_OUTPUT = "production_output"
    SALE = "sale"
    CORRECTION = "correction"


# For StockMovement.reference_type and ledger entries
class ReferenceType(Enum):
    PRODUCTION_RECORD = "production_record"
    SALE_RECORD = "sale_record"
    MATERIAL_RECEIPT = "material_receipt"
    MANUAL_ADJUSTMENT = "manual_adjustment"


class ProductionStage(Enum):
    VALIDATING = "validating"
    RECORDING = "recording"
    CONSUMING = "consuming"
    PRODUCING = "producing"
    COMPLETE = "complete"
    FAILED = "failed"


class SaleStage(Enum):
    VALIDATING = "validating"
    RECORDING = "recording"
    ADJUSTING = "adjusting"
    LEDGER_POSTING = "ledger_posting"
    COMPLETE = "complete"
    FAILED = "failed"


# Store functions reachable through StoreFunctions.call
STORE_FUNCTION_CUSTOMER_ANALYTICS = "get_customer_analytics"
STORE_FUNCTION_RESET_USER_DATA = "reset_user_data"

# Collections wiped by the bulk reset, children first
BUSINESS_TABLES = (
    "stock_movements",
    "customer_transactions",
    "supplier_transactions",
    "production_materials",
    "production_records",
    "sales_records",
    "product_bom",
    "products",
    "raw_materials",
    "persons",
)

# Next-order prediction confidence by number of past orders
PREDICTION_HIGH_CONFIDENCE_ORDERS = 5
PREDICTION_MEDIUM_CONFIDENCE_ORDERS = 3
