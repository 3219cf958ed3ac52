# madrar/data_access/database_manager.py

import sqlite3
import logging
from contextlib import contextmanager
from typing import Optional

from madrar.config import DATABASE_PATH, DB_BUSY_TIMEOUT
from madrar.constants import (
    MaterialUnit, ProductSize, PaymentMethod, PaymentStatus, PersonType,
    CustomerTransactionType, SupplierTransactionType, StockMovementType, ReferenceType
)
from madrar.errors import StoreError

logger = logging.getLogger(__name__)


def _enum_values(enum_cls) -> str:
    return ', '.join(f"'{member.value}'" for member in enum_cls)


class DatabaseManager:
    def __init__(self, db_path: str = DATABASE_PATH, timeout: float = DB_BUSY_TIMEOUT):
        self.db_path = db_path
        self.timeout = timeout
        self._tx_conn: Optional[sqlite3.Connection] = None

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout)
            conn.row_factory = sqlite3.Row  # Access columns by name
            conn.execute("PRAGMA foreign_keys = ON;")  # Enforce foreign key constraints
            logger.debug(f"Database connection established to {self.db_path}")
            return conn
        except sqlite3.Error as e:
            logger.error(f"Error connecting to database {self.db_path}: {e}")
            raise StoreError(f"Cannot connect to database {self.db_path}: {e}") from e

    @property
    def in_transaction(self) -> bool:
        return self._tx_conn is not None

    @contextmanager
    def connection(self):
        """Yields the open transaction's connection, or a short-lived one that commits on success."""
        if self._tx_conn is not None:
            try:
                yield self._tx_conn
            except sqlite3.Error as e:
                logger.error(f"Statement failed inside transaction: {e}")
                raise StoreError(str(e)) from e
            return

        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Statement failed on {self.db_path}: {e}")
            raise StoreError(str(e)) from e
        finally:
            conn.close()
            logger.debug("Database connection closed.")

    @contextmanager
    def transaction(self):
        """
        Serializable unit of work. BEGIN IMMEDIATE takes the write lock before the
        first read, so a read-check-write inside the block cannot interleave with
        another writer. Every statement issued through this manager while the block
        is open joins it; any exception rolls all of them back. Nested calls join
        the outer transaction.
        """
        if self._tx_conn is not None:
            yield self._tx_conn
            return

        conn = self._connect()
        conn.isolation_level = None  # explicit BEGIN/COMMIT below
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            conn.close()
            logger.error(f"Could not start transaction on {self.db_path}: {e}")
            raise StoreError(f"Could not start transaction: {e}") from e

        self._tx_conn = conn
        committed = False
        try:
            yield conn
            conn.execute("COMMIT")
            committed = True
            logger.debug("Transaction committed.")
        except sqlite3.Error as e:
            logger.error(f"Transaction failed on {self.db_path}: {e}")
            raise StoreError(str(e)) from e
        finally:
            self._tx_conn = None
            if not committed:
                try:
                    conn.execute("ROLLBACK")
                    logger.info("Transaction rolled back.")
                except sqlite3.Error as rollback_error:
                    logger.warning(f"Rollback failed: {rollback_error}")
            conn.close()

    def execute_query(self, query, params=None):
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params or ())
            return cursor

    def fetch_one(self, query, params=None):
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params or ())
            return cursor.fetchone()

    def fetch_all(self, query, params=None):
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params or ())
            return cursor.fetchall()

    def create_tables(self):
        # Quantities and money are TEXT holding exact decimal strings
        queries = [
            """
            CREATE TABLE IF NOT EXISTS persons (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                person_type TEXT NOT NULL CHECK(person_type IN ({person_types})),
                phone TEXT,
                notes TEXT,
                created_at TEXT NOT NULL
            );
            """.format(person_types=_enum_values(PersonType)),
            """
            CREATE TABLE IF NOT EXISTS raw_materials (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                name_translations TEXT NOT NULL DEFAULT '{{}}',
                unit TEXT NOT NULL CHECK(unit IN ({units})),
                current_stock TEXT NOT NULL DEFAULT '0',
                min_threshold TEXT NOT NULL DEFAULT '0',
                cost_per_unit TEXT,
                supplier_id TEXT,
                last_received TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT,
                FOREIGN KEY (supplier_id) REFERENCES persons (id) ON DELETE SET NULL
            );
            """.format(units=_enum_values(MaterialUnit)),
            """
            CREATE TABLE IF NOT EXISTS products (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                name_translations TEXT NOT NULL DEFAULT '{{}}',
                size TEXT NOT NULL CHECK(size IN ({sizes})),
                selling_price TEXT,
                production_cost TEXT,
                current_stock TEXT NOT NULL DEFAULT '0',
                min_threshold TEXT NOT NULL DEFAULT '0',
                created_at TEXT NOT NULL,
                updated_at TEXT
            );
            """.format(sizes=_enum_values(ProductSize)),
            """
            CREATE TABLE IF NOT EXISTS product_bom (
                id TEXT PRIMARY KEY,
                product_id TEXT NOT NULL,
                material_id TEXT NOT NULL,
                quantity_per_unit TEXT NOT NULL,
                created_at TEXT NOT NULL,
                UNIQUE (product_id, material_id),
                FOREIGN KEY (product_id) REFERENCES products (id) ON DELETE CASCADE,
                FOREIGN KEY (material_id) REFERENCES raw_materials (id) ON DELETE RESTRICT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS production_records (
                id TEXT PRIMARY KEY,
                product_id TEXT NOT NULL,
                quantity TEXT NOT NULL,
                production_date TEXT NOT NULL,
                total_cost TEXT,
                notes TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (product_id) REFERENCES products (id) ON DELETE RESTRICT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS production_materials (
                id TEXT PRIMARY KEY,
                production_record_id TEXT NOT NULL,
                material_id TEXT NOT NULL,
                quantity_used TEXT NOT NULL,
                cost_at_time TEXT NOT NULL DEFAULT '0',
                FOREIGN KEY (production_record_id) REFERENCES production_records (id) ON DELETE CASCADE,
                FOREIGN KEY (material_id) REFERENCES raw_materials (id) ON DELETE RESTRICT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS sales_records (
                id TEXT PRIMARY KEY,
                product_id TEXT NOT NULL,
                quantity TEXT NOT NULL,
                customer_name TEXT NOT NULL,
                customer_id TEXT,
                sale_price TEXT NOT NULL,
                total_amount TEXT NOT NULL,
                amount_paid TEXT NOT NULL,
                payment_status TEXT NOT NULL CHECK(payment_status IN ({statuses})),
                payment_method TEXT NOT NULL CHECK(payment_method IN ({methods})),
                sale_date TEXT NOT NULL,
                notes TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (product_id) REFERENCES products (id) ON DELETE RESTRICT,
                FOREIGN KEY (customer_id) REFERENCES persons (id) ON DELETE SET NULL
            );
            """.format(statuses=_enum_values(PaymentStatus), methods=_enum_values(PaymentMethod)),
            """
            CREATE TABLE IF NOT EXISTS customer_transactions (
                id TEXT PRIMARY KEY,
                customer_id TEXT NOT NULL,
                transaction_type TEXT NOT NULL CHECK(transaction_type IN ({types})),
                amount TEXT NOT NULL,
                description TEXT,
                reference_id TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (customer_id) REFERENCES persons (id) ON DELETE RESTRICT
            );
            """.format(types=_enum_values(CustomerTransactionType)),
            """
            CREATE TABLE IF NOT EXISTS supplier_transactions (
                id TEXT PRIMARY KEY,
                supplier_id TEXT NOT NULL,
                transaction_type TEXT NOT NULL CHECK(transaction_type IN ({types})),
                amount TEXT NOT NULL,
                description TEXT,
                reference_id TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (supplier_id) REFERENCES persons (id) ON DELETE RESTRICT
            );
            """.format(types=_enum_values(SupplierTransactionType)),
            """
            CREATE TABLE IF NOT EXISTS stock_movements (
                id TEXT PRIMARY KEY,
                material_id TEXT,
                product_id TEXT,
                movement_type TEXT NOT NULL CHECK(movement_type IN ({movement_types})),
                quantity TEXT NOT NULL,
                reference_type TEXT CHECK(reference_type IS NULL OR reference_type IN ({reference_types})),
                reference_id TEXT,
                notes TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (material_id) REFERENCES raw_materials (id) ON DELETE SET NULL,
                FOREIGN KEY (product_id) REFERENCES products (id) ON DELETE SET NULL
            );
            """.format(movement_types=_enum_values(StockMovementType), reference_types=_enum_values(ReferenceType)),
            "CREATE INDEX IF NOT EXISTS idx_product_bom_product ON product_bom (product_id);",
            "CREATE INDEX IF NOT EXISTS idx_production_materials_record ON production_materials (production_record_id);",
            "CREATE INDEX IF NOT EXISTS idx_sales_records_date ON sales_records (sale_date);",
            "CREATE INDEX IF NOT EXISTS idx_sales_records_customer ON sales_records (customer_id);",
            "CREATE INDEX IF NOT EXISTS idx_customer_transactions_customer ON customer_transactions (customer_id);",
        ]
        with self.connection() as conn:
            for query in queries:
                conn.execute(query)
        logger.info(f"Database tables checked/created in {self.db_path}.")
