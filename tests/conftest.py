import os

# Settings are read once at import time; point them at test resources first
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("CACHE_ENABLED", "false")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base, get_db
from app.models import (
    Category,
    Comment,
    Payment,
    Photo,
    PhotoOwner,
    PhotoRole,
    Product,
    ProductCategory,
    Review,
    Store,
    User,
)


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency
app.dependency_overrides[get_db] = override_get_db


class CatalogSeeder:
    """Inserts catalog rows for a test. Every helper commits."""

    def __init__(self, session):
        self.session = session
        self._tick = 0

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def _next_time(self):
        self._tick += 1
        return BASE_TIME + timedelta(minutes=self._tick)

    def user(self, first_name="Ada", last_name="Lovelace", email=None):
        email = email or f"user{self._tick}-{first_name.lower()}@example.com"
        self._tick += 1
        return self._save(User(first_name=first_name, last_name=last_name, email=email))

    def store(self, name="Corner Store", city="Lyon", country="France", **fields):
        return self._save(Store(name=name, city=city, country=country, **fields))

    def category(self, name="Shoes"):
        return self._save(Category(name=name))

    def product(self, store, name="Product", price=10.0, categories=(), created_at=None, **fields):
        fields.setdefault("quantity", 5)
        product = Product(
            name=name,
            price=price,
            store_id=store.id,
            created_at=created_at or self._next_time(),
            **fields,
        )
        product.category_links = [ProductCategory(category_id=c.id) for c in categories]
        return self._save(product)

    def photo(self, owner_type, owner_id, path, role):
        return self._save(Photo(owner_type=owner_type, owner_id=owner_id, path=path, role=role))

    def product_image(self, product, path):
        return self.photo(PhotoOwner.PRODUCT, product.id, path, PhotoRole.PRODUCT_IMAGE)

    def review(self, product, author=None, rating=4, body="Nice", created_at=None):
        return self._save(
            Review(
                product_id=product.id,
                user_id=author.id if author else None,
                rating=rating,
                body=body,
                created_at=created_at or self._next_time(),
            )
        )

    def comment(self, review, author=None, body="Agreed", created_at=None):
        return self._save(
            Comment(
                review_id=review.id,
                user_id=author.id if author else None,
                body=body,
                created_at=created_at or self._next_time(),
            )
        )

    def payments(self, product_id, count, amount=10.0):
        for _ in range(count):
            self.session.add(Payment(product_id=product_id, amount=amount))
        self.session.commit()


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create test client sharing the test database with db_session."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def seed(db_session):
    """Seeder bound to the test session."""
    return CatalogSeeder(db_session)
