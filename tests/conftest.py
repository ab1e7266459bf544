"""
Pytest configuration and shared fixtures.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.models import store as _store_models  # noqa: F401

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed 'current time' for date-bucketed aggregation."""
    return NOW


@pytest.fixture
def sample_orders() -> List[Dict[str, Any]]:
    """Order documents as the storefront writes them (camelCase keys)."""
    return [
        {
            "id": "ORD-1",
            "date": "2024-01-15T09:30:00.000Z",
            "status": "Processing",
            "total": 120.0,
            "items": [
                {"id": "apple", "name": "Apple", "price": 20.0, "quantity": 3, "category": "Fruits"},
                {"id": "milk", "name": "Milk", "price": 30.0, "quantity": 2, "category": "Dairy"},
            ],
            "customerInfo": {"email": "asha@example.com", "firstName": "Asha", "lastName": "Rao"},
        },
        {
            "id": "ORD-2",
            "date": "2024-01-14T18:00:00.000Z",
            "status": "Delivered",
            "total": 200.0,
            "items": [
                {"id": "rice", "name": "Rice", "price": 100.0, "quantity": 2, "category": "Grains"},
            ],
            "customerInfo": {"email": "ben@example.com", "firstName": "Ben", "lastName": "Ode"},
        },
        {
            "id": "ORD-3",
            "date": "2024-01-10T08:00:00.000Z",
            "status": "Delivered",
            "total": 60.0,
            "items": [
                {"id": "apple", "name": "Apple", "price": 20.0, "quantity": 3, "category": "Fruits"},
            ],
            "customerInfo": {"email": "asha@example.com", "firstName": "Asha", "lastName": "Rao"},
        },
        # Guest order: no customer info, item without category
        {
            "id": "ORD-4",
            "date": "2024-01-15T11:00:00.000Z",
            "status": "Cancelled",
            "total": 40.0,
            "items": [
                {"id": "bread", "name": "Bread", "price": 40.0, "quantity": 1},
            ],
        },
    ]


@pytest.fixture
def sample_customers() -> List[Dict[str, Any]]:
    """Customer documents from the `users` store key."""
    return [
        {"email": "asha@example.com", "joinDate": "2024-01-05T10:00:00.000Z", "firstName": "Asha"},
        {"email": "ben@example.com", "joinDate": "2023-10-01T10:00:00.000Z", "password": "secret"},
        {"email": "cara@example.com", "joinDate": "2024-01-14T10:00:00.000Z"},
    ]


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across threads (TestClient)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session
