"""
Entity types and a small seeded generator used across export tests.

The generator stands in for the real synthetic-data engine: it produces
deterministic instances for a given seed so tests can assert on values.
"""
import datetime
import decimal
import enum
import random
import uuid
from dataclasses import dataclass, field

import pytest
from schemaexport import EntityDefinition, GeneratedData, PropertyDefinition
from schemaexport import Schema


class EntityStatus(enum.Enum):
    PENDING = 0
    ACTIVE = 1
    CLOSED = 2


@dataclass
class Company:
    id: int
    name: str


@dataclass
class Product:
    id: int
    name: str
    price: decimal.Decimal
    is_active: bool


@dataclass
class Customer:
    id: int
    company_id: int
    name: str
    email: str | None = None


@dataclass
class Order:
    id: int
    customer_id: int
    placed_at: datetime.datetime
    total: float
    reference: uuid.UUID


@dataclass
class ConvertibleEntity:
    id: int
    name: str
    status: EntityStatus


@dataclass
class Address:
    street: str
    city: str


@dataclass
class EntityWithAddress:
    id: int
    name: str
    home_address: Address | None = None


@dataclass
class Tagged:
    tags: list[str] = field(default_factory=list)
    address: Address | None = None


def make_companies(count, seed=42):
    rng = random.Random(seed)
    return [Company(id=i, name=f'Company {rng.randint(100, 999)}') for i in range(1, count + 1)]


def make_products(count, seed=42):
    rng = random.Random(seed)
    return [Product(id=i, name=f'Product {i}',
                    price=decimal.Decimal(rng.randint(100, 9999)) / 100,
                    is_active=bool(i % 2))
            for i in range(1, count + 1)]


def make_customers(count, companies, seed=42):
    rng = random.Random(seed)
    return [Customer(id=i, company_id=rng.choice(companies).id, name=f'Customer {i}',
                     email=None if i % 3 == 0 else f'customer{i}@example.com')
            for i in range(1, count + 1)]


def make_orders(count, customers, seed=42):
    rng = random.Random(seed)
    start = datetime.datetime(2024, 1, 1, 9, 30)
    return [Order(id=i, customer_id=rng.choice(customers).id,
                  placed_at=start + datetime.timedelta(hours=i),
                  total=round(rng.uniform(1, 500), 2),
                  reference=uuid.UUID(int=rng.getrandbits(128)))
            for i in range(1, count + 1)]


def make_convertibles(count, seed=42):
    rng = random.Random(seed)
    statuses = list(EntityStatus)
    return [ConvertibleEntity(id=i, name=f'Entity {i}', status=rng.choice(statuses))
            for i in range(1, count + 1)]


@pytest.fixture
def store_schema():
    """Company -> Product -> Customer -> Order, parents first."""
    return Schema([
        EntityDefinition(Company),
        EntityDefinition(Product),
        EntityDefinition(Customer),
        EntityDefinition(Order),
    ])


@pytest.fixture
def store_data():
    """Seeded instances for the store schema: 3 companies, 5 products, 10 customers, 20 orders."""
    companies = make_companies(3)
    customers = make_customers(10, companies)
    return GeneratedData([
        (Company, companies),
        (Product, make_products(5)),
        (Customer, customers),
        (Order, make_orders(20, customers)),
    ])


@pytest.fixture
def status_as_name():
    return PropertyDefinition('status', conversion=lambda s: s.name, returns=str)
