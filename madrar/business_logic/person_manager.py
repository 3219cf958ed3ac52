# madrar/business_logic/person_manager.py

from decimal import Decimal
from typing import Any, Dict, List, Optional
import logging

from madrar.business_logic.entities.person_entity import PersonEntity
from madrar.business_logic.entities.customer_transaction_entity import CustomerTransactionEntity
from madrar.business_logic.entities.supplier_transaction_entity import SupplierTransactionEntity
from madrar.data_access.persons_repository import PersonsRepository
from madrar.data_access.customer_transactions_repository import CustomerTransactionsRepository
from madrar.data_access.supplier_transactions_repository import SupplierTransactionsRepository
from madrar.data_access.store_functions import StoreFunctions
from madrar.constants import (
    PersonType, CustomerTransactionType, SupplierTransactionType, STORE_FUNCTION_CUSTOMER_ANALYTICS
)
from madrar.errors import NotFoundError, ValidationError
from madrar.utils.number_utils import to_enum, to_positive_decimal, quantize_money

logger = logging.getLogger(__name__)


class PersonManager:
    def __init__(self,
                 persons_repository: PersonsRepository,
                 customer_transactions_repository: CustomerTransactionsRepository,
                 supplier_transactions_repository: SupplierTransactionsRepository,
                 store_functions: StoreFunctions):
        """
        Manages customers and suppliers together with their ledgers.
        :param persons_repository: An instance of PersonsRepository.
        :param store_functions: Used for the customer analytics aggregate.
        """
        if persons_repository is None:
            raise ValueError("persons_repository cannot be None")
        if customer_transactions_repository is None:
            raise ValueError("customer_transactions_repository cannot be None")
        if supplier_transactions_repository is None:
            raise ValueError("supplier_transactions_repository cannot be None")
        if store_functions is None:
            raise ValueError("store_functions cannot be None")
        self.persons_repository = persons_repository
        self.customer_transactions_repo = customer_transactions_repository
        self.supplier_transactions_repo = supplier_transactions_repository
        self.store_functions = store_functions

    def add_person(self, name: str, person_type: Any, phone: Optional[str] = None,
                   notes: Optional[str] = None) -> PersonEntity:
        """
        Adds a new customer or supplier.
        Validates input and then uses the repository to save the person.
        """
        if not name or not isinstance(name, str) or not name.strip():
            logger.error("Person name cannot be empty.")
            raise ValidationError("Person name cannot be empty.", "validation.name_required")
        person_type = to_enum(PersonType, person_type, "person_type")

        created_person = self.persons_repository.add(PersonEntity(
            name=name.strip(),
            person_type=person_type,
            phone=phone,
            notes=notes
        ))
        logger.info(f"Person '{created_person.name}' (ID: {created_person.id}) added as {person_type.value}.")
        return created_person

    def add_customer(self, name: str, phone: Optional[str] = None, notes: Optional[str] = None) -> PersonEntity:
        return self.add_person(name, PersonType.CUSTOMER, phone, notes)

    def add_supplier(self, name: str, phone: Optional[str] = None, notes: Optional[str] = None) -> PersonEntity:
        return self.add_person(name, PersonType.SUPPLIER, phone, notes)

    def get_person_by_id(self, person_id: str) -> Optional[PersonEntity]:
        """Retrieves a person by their ID."""
        person = self.persons_repository.get_by_id(person_id)
        if person:
            logger.debug(f"Person with ID {person_id} found: {person.name}")
        else:
            logger.debug(f"Person with ID {person_id} not found.")
        return person

    def require_person(self, person_id: str, person_type: Optional[PersonType] = None) -> PersonEntity:
        """Like get_person_by_id, but raises when the person is missing or of the other type."""
        person = self.persons_repository.get_by_id(person_id) if person_id else None
        if person is None:
            raise NotFoundError("Person", person_id)
        if person_type is not None and person.person_type != person_type:
            raise ValidationError(f"'{person.name}' is not a {person_type.value}.",
                                  "validation.wrong_person_type", name=person.name, person_type=person_type.value)
        return person

    def get_all_persons(self) -> List[PersonEntity]:
        """Retrieves all persons."""
        logger.debug("Fetching all persons.")
        return self.persons_repository.get_all(order_by="name")

    def get_customers(self) -> List[PersonEntity]:
        return self.persons_repository.get_by_type(PersonType.CUSTOMER)

    def get_suppliers(self) -> List[PersonEntity]:
        return self.persons_repository.get_by_type(PersonType.SUPPLIER)

    def update_person(self, person_id: str, name: Optional[str] = None, phone: Optional[str] = None,
                      notes: Optional[str] = None) -> PersonEntity:
        person = self.require_person(person_id)
        patch: Dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Person name cannot be empty.", "validation.name_required")
            patch["name"] = name.strip()
        if phone is not None:
            patch["phone"] = phone
        if notes is not None:
            patch["notes"] = notes
        if not patch:
            return person
        updated = self.persons_repository.update_fields(person_id, patch)
        logger.info(f"Person ID {person_id} updated: {sorted(patch)}")
        return updated

    def delete_person(self, person_id: str) -> bool:
        """
        Deletes a customer or supplier without ledger entries. Sales and
        materials linked to them keep their rows without the link.
        """
        db_manager = self.persons_repository.db_manager
        with db_manager.transaction():
            person = self.persons_repository.get_by_id(person_id)
            if person is None:
                raise NotFoundError("Person", person_id)
            if self.customer_transactions_repo.get_by_customer_id(person_id) or \
                    self.supplier_transactions_repo.get_by_supplier_id(person_id):
                logger.warning(f"Refusing to delete person '{person.name}' (ID: {person_id}) with ledger entries.")
                raise ValidationError(f"Person '{person.name}' has ledger entries.",
                                      "validation.person_has_history", name=person.name)
            self.persons_repository.delete(person_id)
        logger.info(f"Person '{person.name}' (ID: {person_id}) deleted.")
        return True

    # --- Customer ledger ---

    def record_sale_charge(self, customer_id: str, amount: Any, sale_id: str,
                           description: Optional[str] = None) -> CustomerTransactionEntity:
        """Posts what a customer still owes for a sale."""
        self.require_person(customer_id, PersonType.CUSTOMER)
        amount = quantize_money(to_positive_decimal(amount, "amount"))
        entry = self.customer_transactions_repo.add(CustomerTransactionEntity(
            customer_id=customer_id,
            transaction_type=CustomerTransactionType.SALE,
            amount=amount,
            description=description,
            reference_id=sale_id,
        ))
        logger.info(f"Customer ID {customer_id} charged {amount} for sale {sale_id}.")
        return entry

    def record_customer_payment(self, customer_id: str, amount: Any,
                                description: Optional[str] = None) -> CustomerTransactionEntity:
        self.require_person(customer_id, PersonType.CUSTOMER)
        amount = quantize_money(to_positive_decimal(amount, "amount"))
        entry = self.customer_transactions_repo.add(CustomerTransactionEntity(
            customer_id=customer_id,
            transaction_type=CustomerTransactionType.PAYMENT,
            amount=amount,
            description=description,
        ))
        logger.info(f"Payment of {amount} received from customer ID {customer_id}.")
        return entry

    def get_customer_ledger(self, customer_id: str) -> List[CustomerTransactionEntity]:
        return self.customer_transactions_repo.get_by_customer_id(customer_id)

    def get_customer_balance(self, customer_id: str) -> Decimal:
        """What the customer owes: sale charges minus payments."""
        balance = Decimal("0")
        for entry in self.customer_transactions_repo.get_by_customer_id(customer_id):
            if entry.transaction_type == CustomerTransactionType.SALE:
                balance += entry.amount
            else:
                balance -= entry.amount
        return balance

    # --- Supplier ledger ---

    def record_supplier_purchase(self, supplier_id: str, amount: Any, reference_id: Optional[str] = None,
                                 description: Optional[str] = None) -> SupplierTransactionEntity:
        self.require_person(supplier_id, PersonType.SUPPLIER)
        amount = quantize_money(to_positive_decimal(amount, "amount"))
        entry = self.supplier_transactions_repo.add(SupplierTransactionEntity(
            supplier_id=supplier_id,
            transaction_type=SupplierTransactionType.PURCHASE,
            amount=amount,
            description=description,
            reference_id=reference_id,
        ))
        logger.info(f"Purchase of {amount} posted for supplier ID {supplier_id}.")
        return entry

    def record_supplier_payment(self, supplier_id: str, amount: Any,
                                description: Optional[str] = None) -> SupplierTransactionEntity:
        self.require_person(supplier_id, PersonType.SUPPLIER)
        amount = quantize_money(to_positive_decimal(amount, "amount"))
        entry = self.supplier_transactions_repo.add(SupplierTransactionEntity(
            supplier_id=supplier_id,
            transaction_type=SupplierTransactionType.PAYMENT,
            amount=amount,
            description=description,
        ))
        logger.info(f"Payment of {amount} made to supplier ID {supplier_id}.")
        return entry

    def get_supplier_ledger(self, supplier_id: str) -> List[SupplierTransactionEntity]:
        return self.supplier_transactions_repo.get_by_supplier_id(supplier_id)

    def get_supplier_balance(self, supplier_id: str) -> Decimal:
        """What we owe the supplier: purchases minus payments."""
        balance = Decimal("0")
        for entry in self.supplier_transactions_repo.get_by_supplier_id(supplier_id):
            if entry.transaction_type == SupplierTransactionType.PURCHASE:
                balance += entry.amount
            else:
                balance -= entry.amount
        return balance

    def get_customer_analytics(self, customer_id: str) -> Dict[str, Any]:
        result = self.store_functions.call(STORE_FUNCTION_CUSTOMER_ANALYTICS, customer_uuid=customer_id)
        if "error" in result:
            logger.warning(f"Customer analytics unavailable for ID {customer_id}: {result['error']}")
            raise NotFoundError("Person", customer_id)
        return result
