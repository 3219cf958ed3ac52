# madrar/main_app.py
import logging
import logging.config
import sys
from dataclasses import dataclass
from typing import Optional

# --- Configuration and Constants ---
from madrar import config

# --- Data Access Layer (DAL) ---
from madrar.data_access.database_manager import DatabaseManager
from madrar.data_access.persons_repository import PersonsRepository
from madrar.data_access.raw_materials_repository import RawMaterialsRepository
from madrar.data_access.products_repository import ProductsRepository
from madrar.data_access.bom_repository import BomRepository
from madrar.data_access.production_records_repository import ProductionRecordsRepository
from madrar.data_access.production_materials_repository import ProductionMaterialsRepository
from madrar.data_access.sales_records_repository import SalesRecordsRepository
from madrar.data_access.customer_transactions_repository import CustomerTransactionsRepository
from madrar.data_access.supplier_transactions_repository import SupplierTransactionsRepository
from madrar.data_access.stock_movements_repository import StockMovementsRepository
from madrar.data_access.store_functions import StoreFunctions

# --- Business Logic Layer (BLL) ---
from madrar.business_logic.inventory_manager import InventoryManager
from madrar.business_logic.bom_manager import BomManager
from madrar.business_logic.person_manager import PersonManager
from madrar.business_logic.raw_material_manager import RawMaterialManager
from madrar.business_logic.product_manager import ProductManager
from madrar.business_logic.production_manager import ProductionManager
from madrar.business_logic.sales_manager import SalesManager
from madrar.business_logic.report_manager import ReportManager
from madrar.business_logic.data_reset_manager import DataResetManager
from madrar.errors import MadrarError
from madrar.utils.messages import localize_error

logger = logging.getLogger(__name__)


def configure_logging():
    config.ensure_directories()
    logging.config.dictConfig(config.LOGGING_CONFIG)


@dataclass
class MadrarApplication:
    db_manager: DatabaseManager
    store_functions: StoreFunctions
    inventory_manager: InventoryManager
    bom_manager: BomManager
    person_manager: PersonManager
    raw_material_manager: RawMaterialManager
    product_manager: ProductManager
    production_manager: ProductionManager
    sales_manager: SalesManager
    report_manager: ReportManager
    data_reset_manager: DataResetManager


def build_application(db_path: Optional[str] = None, admin_password: Optional[str] = None) -> MadrarApplication:
    """Creates the schema if needed and wires every repository and manager to one DatabaseManager."""
    logger.info("Initializing Database Manager and creating tables...")
    if db_path is None:
        config.ensure_directories()
        db_path = config.DATABASE_PATH
    db_manager = DatabaseManager(db_path)
    db_manager.create_tables()

    logger.info("Initializing Repositories...")
    persons_repo = PersonsRepository(db_manager)
    raw_materials_repo = RawMaterialsRepository(db_manager)
    products_repo = ProductsRepository(db_manager)
    bom_repo = BomRepository(db_manager)
    production_records_repo = ProductionRecordsRepository(db_manager)
    production_materials_repo = ProductionMaterialsRepository(db_manager)
    sales_repo = SalesRecordsRepository(db_manager)
    customer_transactions_repo = CustomerTransactionsRepository(db_manager)
    supplier_transactions_repo = SupplierTransactionsRepository(db_manager)
    stock_movements_repo = StockMovementsRepository(db_manager)
    store_functions = StoreFunctions(db_manager, persons_repo, products_repo, sales_repo,
                                     admin_password=admin_password)

    logger.info("Initializing Managers...")
    inventory_manager = InventoryManager(raw_materials_repo, products_repo, stock_movements_repo)
    bom_manager = BomManager(bom_repo, raw_materials_repo, products_repo)
    person_manager = PersonManager(persons_repo, customer_transactions_repo, supplier_transactions_repo,
                                   store_functions)
    raw_material_manager = RawMaterialManager(raw_materials_repo, bom_repo, inventory_manager, person_manager)
    product_manager = ProductManager(products_repo, production_records_repo, sales_repo, inventory_manager)
    production_manager = ProductionManager(production_records_repo, production_materials_repo, products_repo,
                                           raw_materials_repo, bom_manager, inventory_manager)
    sales_manager = SalesManager(sales_repo, products_repo, inventory_manager, person_manager)
    report_manager = ReportManager(raw_materials_repo, products_repo, sales_manager)
    data_reset_manager = DataResetManager(store_functions)

    return MadrarApplication(
        db_manager=db_manager,
        store_functions=store_functions,
        inventory_manager=inventory_manager,
        bom_manager=bom_manager,
        person_manager=person_manager,
        raw_material_manager=raw_material_manager,
        product_manager=product_manager,
        production_manager=production_manager,
        sales_manager=sales_manager,
        report_manager=report_manager,
        data_reset_manager=data_reset_manager,
    )


def main() -> int:
    configure_logging()
    try:
        app = build_application()
    except MadrarError as e:
        logger.error(f"FATAL: Could not initialize database: {e}", exc_info=True)
        print(localize_error(e, config.DEFAULT_LANGUAGE), file=sys.stderr)
        return 1

    summary = app.report_manager.get_dashboard_summary()
    for key, value in summary.items():
        print(f"{key}: {value}")
    for alert in app.report_manager.get_low_stock_alerts(config.DEFAULT_LANGUAGE):
        print(f"LOW STOCK {alert.item_type}: {alert.name} {alert.current_stock}/{alert.min_threshold} {alert.unit}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
