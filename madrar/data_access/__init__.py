# madrar/data_access/__init__.py

from .database_manager import DatabaseManager
from .base_repository import BaseRepository

from .persons_repository import PersonsRepository
from .raw_materials_repository import RawMaterialsRepository
from .products_repository import ProductsRepository
from .bom_repository import BomRepository
from .production_records_repository import ProductionRecordsRepository
from .production_materials_repository import ProductionMaterialsRepository
from .sales_records_repository import SalesRecordsRepository
from .customer_transactions_repository import CustomerTransactionsRepository
from .supplier_transactions_repository import SupplierTransactionsRepository
from .stock_movements_repository import StockMovementsRepository
from .store_functions import StoreFunctions

ALL_REPOSITORIES = [
    PersonsRepository, RawMaterialsRepository, ProductsRepository, BomRepository,
    ProductionRecordsRepository, ProductionMaterialsRepository, SalesRecordsRepository,
    CustomerTransactionsRepository, SupplierTransactionsRepository, StockMovementsRepository,
]
