# madrar/data_access/persons_repository.py
from typing import List
import logging

from madrar.data_access.base_repository import BaseRepository
from madrar.data_access.database_manager import DatabaseManager
from madrar.business_logic.entities.person_entity import PersonEntity
from madrar.constants import PersonType

logger = logging.getLogger(__name__)


class PersonsRepository(BaseRepository[PersonEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, PersonEntity, "persons")

    def get_by_type(self, person_type: PersonType) -> List[PersonEntity]:
        return self.find_by_criteria({"person_type": person_type}, order_by="name")
