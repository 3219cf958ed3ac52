# madrar/data_access/base_repository.py

import json
import logging
import uuid
from dataclasses import fields, MISSING
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Generic, TypeVar, Type, List, Optional, Dict, Any, Union, TYPE_CHECKING

from madrar.data_access.database_manager import DatabaseManager
from madrar.utils.date_converter import now

if TYPE_CHECKING:
    from madrar.business_logic.entities.base_entity import BaseEntity

logger = logging.getLogger(__name__)

T = TypeVar('T', bound='BaseEntity')


def to_db_value(value: Any) -> Any:
    """Converts a Python value into what is stored in a column."""
    if isinstance(value, Decimal):
        return str(value)  # exact, never float
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return value


class BaseRepository(Generic[T]):
    """
    Maps one dataclass entity type onto one table. Only ``init`` fields of the
    dataclass are persisted; ``init=False`` fields are display-only.
    """

    def __init__(self, db_manager: DatabaseManager, model_type: Type[T], table_name: str):
        self.db_manager = db_manager
        self.model_type = model_type
        self._table_name = table_name
        self._db_columns = [f.name for f in fields(model_type) if f.init]
        self._has_created_at = 'created_at' in self._db_columns
        self._has_updated_at = 'updated_at' in self._db_columns
        logger.debug(f"BaseRepository for {self._table_name} initialized. Columns: {self._db_columns}")

    @property
    def table_name(self) -> str:
        return self._table_name

    def get_by_id(self, entity_id: str) -> Optional[T]:
        query = f"SELECT * FROM {self._table_name} WHERE id = ?"
        row = self.db_manager.fetch_one(query, (entity_id,))
        return self._entity_from_row(dict(row)) if row else None

    def get_all(self, order_by: Optional[str] = None) -> List[T]:
        query = f"SELECT * FROM {self._table_name}"
        if order_by:
            query += f" ORDER BY {order_by}"
        rows = self.db_manager.fetch_all(query)
        return [self._entity_from_row(dict(row)) for row in rows]

    def find_by_criteria(self, criteria: Dict[str, Any], order_by: Optional[str] = None,
                         limit: Optional[int] = None) -> List[T]:
        """
        Finds rows matching every criterion. A value may be a plain value (equality),
        None (IS NULL) or an ``(operator, value)`` tuple such as ``('>=', day)`` or
        ``('BETWEEN', (start, end))``.
        """
        conditions = []
        params = []
        for key, value in (criteria or {}).items():
            if isinstance(value, tuple) and len(value) == 2:
                operator, val = value
                if str(operator).upper() == 'BETWEEN' and isinstance(val, (list, tuple)) and len(val) == 2:
                    conditions.append(f"{key} BETWEEN ? AND ?")
                    params.extend(to_db_value(v) for v in val)
                else:
                    conditions.append(f"{key} {operator} ?")
                    params.append(to_db_value(val))
            elif value is None:
                conditions.append(f"{key} IS NULL")
            else:
                conditions.append(f"{key} = ?")
                params.append(to_db_value(value))

        query = f"SELECT * FROM {self._table_name}"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        if order_by:
            query += f" ORDER BY {order_by}"
        if limit is not None:
            query += " LIMIT ?"
            params.append(int(limit))

        logger.debug(f"BaseRepository.find_by_criteria: Query: {query}, Values: {tuple(params)}")
        rows = self.db_manager.fetch_all(query, tuple(params))
        return [self._entity_from_row(dict(row)) for row in rows]

    def add(self, entity: T) -> T:
        """Inserts the entity, assigning its id and created_at. Store failures propagate as StoreError."""
        if not entity.id:
            entity.id = uuid.uuid4().hex
        if self._has_created_at and getattr(entity, 'created_at', None) is None:
            entity.created_at = now()

        fields_to_insert = self._entity_to_dict_for_db(entity)
        columns = ', '.join(fields_to_insert.keys())
        placeholders = ', '.join(['?'] * len(fields_to_insert))
        query = f"INSERT INTO {self._table_name} ({columns}) VALUES ({placeholders})"

        logger.debug(f"BaseRepository.add: Query: {query}, Values: {tuple(fields_to_insert.values())}")
        self.db_manager.execute_query(query, tuple(fields_to_insert.values()))
        logger.debug(f"BaseRepository.add: {type(entity).__name__} {entity.id} inserted into {self._table_name}.")
        return entity

    def update_fields(self, entity_id: str, patch: Dict[str, Any]) -> Optional[T]:
        """Applies a partial update and returns the refreshed entity, or None if the id does not resolve."""
        unknown = [key for key in patch if key not in self._db_columns or key in ('id', 'created_at')]
        if unknown:
            raise ValueError(f"Cannot update fields {unknown} of {self._table_name}.")

        values = {key: to_db_value(value) for key, value in patch.items()}
        if self._has_updated_at and 'updated_at' not in values:
            values['updated_at'] = to_db_value(now())
        if not values:
            return self.get_by_id(entity_id)

        set_clause = ', '.join([f"{key} = ?" for key in values.keys()])
        query = f"UPDATE {self._table_name} SET {set_clause} WHERE id = ?"
        cursor = self.db_manager.execute_query(query, tuple(values.values()) + (entity_id,))
        if cursor.rowcount == 0:
            logger.warning(f"BaseRepository.update_fields: No row with ID {entity_id} in {self._table_name}.")
            return None
        return self.get_by_id(entity_id)

    def delete(self, entity_id: str) -> bool:
        query = f"DELETE FROM {self._table_name} WHERE id = ?"
        cursor = self.db_manager.execute_query(query, (entity_id,))
        deleted = cursor.rowcount > 0
        if deleted:
            logger.debug(f"BaseRepository.delete: Entity ID {entity_id} deleted from {self._table_name}.")
        return deleted

    def delete_by_criteria(self, criteria: Dict[str, Any]) -> int:
        if not criteria:
            raise ValueError("delete_by_criteria requires at least one criterion.")
        conditions = [f"{key} = ?" for key in criteria]
        query = f"DELETE FROM {self._table_name} WHERE " + " AND ".join(conditions)
        cursor = self.db_manager.execute_query(query, tuple(to_db_value(v) for v in criteria.values()))
        return cursor.rowcount

    def count(self) -> int:
        row = self.db_manager.fetch_one(f"SELECT COUNT(*) AS total FROM {self._table_name}")
        return row['total'] if row else 0

    def _entity_to_dict_for_db(self, entity: T) -> Dict[str, Any]:
        return {col: to_db_value(getattr(entity, col, None)) for col in self._db_columns}

    def _entity_from_row(self, row: Dict[str, Any]) -> T:
        """Builds the entity from a row, converting each column by the dataclass field's declared type."""
        entity_data = {}

        for f in fields(self.model_type):
            if not f.init:
                continue

            field_name = f.name
            field_type = f.type
            value_from_db = row.get(field_name)

            if value_from_db is None:
                if f.default is MISSING and f.default_factory is MISSING:
                    is_optional = getattr(field_type, '__origin__', None) is Union and type(None) in getattr(field_type, '__args__', [])
                    if not is_optional:
                        raise ValueError(
                            f"Database integrity error: NULL value found for required field '{field_name}' "
                            f"in table '{self._table_name}' for row: {row}"
                        )
                    entity_data[field_name] = None
                continue

            actual_type = field_type
            if getattr(field_type, '__origin__', None) is Union:
                possible_types = [arg for arg in getattr(field_type, '__args__', []) if arg is not type(None)]
                if possible_types:
                    actual_type = possible_types[0]

            is_enum = isinstance(actual_type, type) and issubclass(actual_type, Enum)

            if is_enum:
                entity_data[field_name] = actual_type(value_from_db)
            elif actual_type == Decimal:
                entity_data[field_name] = Decimal(str(value_from_db))
            elif actual_type == datetime and isinstance(value_from_db, str):
                entity_data[field_name] = datetime.fromisoformat(value_from_db)
            elif actual_type == date and isinstance(value_from_db, str):
                entity_data[field_name] = date.fromisoformat(value_from_db.split("T")[0])
            elif actual_type == bool and isinstance(value_from_db, int):
                entity_data[field_name] = bool(value_from_db)
            elif getattr(actual_type, '__origin__', None) is dict and isinstance(value_from_db, str):
                entity_data[field_name] = json.loads(value_from_db) if value_from_db else {}
            else:
                entity_data[field_name] = value_from_db

        return self.model_type(**entity_data)
