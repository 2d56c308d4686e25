"""
Transaction Store Module

Persistence collaborator used by the importer: accounts, categories and
transactions scoped to a user. Two implementations share one interface:
an in-memory store and a SQLAlchemy Core store with a unique constraint on
(user, date, amount, description).
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import (
    Column,
    Date,
    MetaData,
    Numeric,
    String,
    Table,
    UniqueConstraint,
    create_engine,
    insert,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from statement_parser.errors import DuplicateTransaction

logger = logging.getLogger(__name__)


@dataclass
class Account:
    id: str
    user_id: str
    name: str
    account_number: str | None = None


@dataclass
class Category:
    id: str
    user_id: str
    name: str
    direction: str


@dataclass
class StoredTransaction:
    id: str
    user_id: str
    account_id: str
    date: date
    amount: Decimal
    direction: str
    description: str
    category_id: str


def _new_id() -> str:
    return str(uuid.uuid4())


class TransactionStore(ABC):
    """Interface the importer needs from persistence."""

    @abstractmethod
    def create_account(self, user_id: str, name: str, account_number: str | None = None) -> Account:
        """Register an account for a user."""

    @abstractmethod
    def find_account(self, user_id: str, account_id: str) -> Account | None:
        """Find an account owned by the user."""

    @abstractmethod
    def list_accounts(self, user_id: str) -> list[Account]:
        """List the user's accounts."""

    @abstractmethod
    def find_existing_transaction(
        self,
        user_id: str,
        txn_date: date,
        amount: Decimal,
        description: str,
    ) -> StoredTransaction | None:
        """Find a stored transaction with the same deduplication key."""

    @abstractmethod
    def list_categories(self, user_id: str) -> list[Category]:
        """List the user's categories."""

    @abstractmethod
    def create_category(self, user_id: str, name: str, direction: str) -> Category:
        """Create a category for the user."""

    @abstractmethod
    def create_transaction(
        self,
        user_id: str,
        account_id: str,
        txn_date: date,
        amount: Decimal,
        direction: str,
        description: str,
        category_id: str,
    ) -> StoredTransaction:
        """Persist a transaction.

        Raises:
            DuplicateTransaction: If the deduplication key is already stored
        """


class InMemoryStore(TransactionStore):
    """Dictionary-backed store for tests and single-process use."""

    def __init__(self):
        self.accounts: dict[str, Account] = {}
        self.categories: dict[str, Category] = {}
        self.transactions: dict[str, StoredTransaction] = {}

    def create_account(self, user_id: str, name: str, account_number: str | None = None) -> Account:
        account = Account(id=_new_id(), user_id=user_id, name=name, account_number=account_number)
        self.accounts[account.id] = account
        return account

    def find_account(self, user_id: str, account_id: str) -> Account | None:
        account = self.accounts.get(account_id)
        if account and account.user_id == user_id:
            return account
        return None

    def list_accounts(self, user_id: str) -> list[Account]:
        return [a for a in self.accounts.values() if a.user_id == user_id]

    def find_existing_transaction(
        self,
        user_id: str,
        txn_date: date,
        amount: Decimal,
        description: str,
    ) -> StoredTransaction | None:
        for txn in self.transactions.values():
            if (
                txn.user_id == user_id
                and txn.date == txn_date
                and txn.amount == abs(amount)
                and txn.description == description
            ):
                return txn
        return None

    def list_categories(self, user_id: str) -> list[Category]:
        return [c for c in self.categories.values() if c.user_id == user_id]

    def create_category(self, user_id: str, name: str, direction: str) -> Category:
        category = Category(id=_new_id(), user_id=user_id, name=name, direction=direction)
        self.categories[category.id] = category
        return category

    def create_transaction(
        self,
        user_id: str,
        account_id: str,
        txn_date: date,
        amount: Decimal,
        direction: str,
        description: str,
        category_id: str,
    ) -> StoredTransaction:
        if self.find_existing_transaction(user_id, txn_date, amount, description):
            raise DuplicateTransaction(f"{txn_date} {amount} {description!r}")

        txn = StoredTransaction(
            id=_new_id(),
            user_id=user_id,
            account_id=account_id,
            date=txn_date,
            amount=abs(amount),
            direction=direction,
            description=description,
            category_id=category_id,
        )
        self.transactions[txn.id] = txn
        return txn


metadata = MetaData()

accounts_table = Table(
    "accounts",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("name", String(255), nullable=False),
    Column("account_number", String(20)),
)

categories_table = Table(
    "categories",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("name", String(255), nullable=False),
    Column("direction", String(7), nullable=False),
    UniqueConstraint("user_id", "name", "direction", name="uq_category_user_name"),
)

transactions_table = Table(
    "transactions",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("account_id", String(36), nullable=False),
    Column("date", Date, nullable=False),
    Column("amount", Numeric(14, 2), nullable=False),
    Column("direction", String(7), nullable=False),
    Column("description", String(500), nullable=False),
    Column("category_id", String(36), nullable=False),
    UniqueConstraint("user_id", "date", "amount", "description", name="uq_transaction_dedup"),
)


class SQLTransactionStore(TransactionStore):
    """SQLAlchemy Core store."""

    def __init__(self, database_url: str | None = None, engine: Engine | None = None):
        """Initialize the store and create tables if missing.

        Args:
            database_url: SQLAlchemy URL, used when no engine is given
            engine: Pre-built engine
        """
        self.engine = engine or create_engine(database_url or "sqlite:///statement_import.db")
        metadata.create_all(self.engine)

    def create_account(self, user_id: str, name: str, account_number: str | None = None) -> Account:
        account = Account(id=_new_id(), user_id=user_id, name=name, account_number=account_number)
        with self.engine.begin() as conn:
            conn.execute(insert(accounts_table).values(**account.__dict__))
        return account

    def find_account(self, user_id: str, account_id: str) -> Account | None:
        query = select(accounts_table).where(
            accounts_table.c.id == account_id,
            accounts_table.c.user_id == user_id,
        )
        with self.engine.connect() as conn:
            row = conn.execute(query).mappings().first()
        return Account(**row) if row else None

    def list_accounts(self, user_id: str) -> list[Account]:
        query = select(accounts_table).where(accounts_table.c.user_id == user_id)
        with self.engine.connect() as conn:
            return [Account(**row) for row in conn.execute(query).mappings()]

    def find_existing_transaction(
        self,
        user_id: str,
        txn_date: date,
        amount: Decimal,
        description: str,
    ) -> StoredTransaction | None:
        query = select(transactions_table).where(
            transactions_table.c.user_id == user_id,
            transactions_table.c.date == txn_date,
            transactions_table.c.amount == abs(amount),
            transactions_table.c.description == description,
        ).limit(1)
        with self.engine.connect() as conn:
            row = conn.execute(query).mappings().first()
        return StoredTransaction(**row) if row else None

    def list_categories(self, user_id: str) -> list[Category]:
        query = select(categories_table).where(categories_table.c.user_id == user_id)
        with self.engine.connect() as conn:
            return [Category(**row) for row in conn.execute(query).mappings()]

    def create_category(self, user_id: str, name: str, direction: str) -> Category:
        category = Category(id=_new_id(), user_id=user_id, name=name, direction=direction)
        with self.engine.begin() as conn:
            conn.execute(insert(categories_table).values(**category.__dict__))
        return category

    def create_transaction(
        self,
        user_id: str,
        account_id: str,
        txn_date: date,
        amount: Decimal,
        direction: str,
        description: str,
        category_id: str,
    ) -> StoredTransaction:
        txn = StoredTransaction(
            id=_new_id(),
            user_id=user_id,
            account_id=account_id,
            date=txn_date,
            amount=abs(amount),
            direction=direction,
            description=description,
            category_id=category_id,
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(transactions_table).values(**txn.__dict__))
        except IntegrityError as e:
            raise DuplicateTransaction(f"{txn_date} {amount} {description!r}") from e
        return txn
