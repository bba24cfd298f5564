"""Tests for product filter predicates."""
from unittest.mock import patch

import pytest
from sqlalchemy import select

from app.models import Product
from app.services.exceptions import BadRequestError
from app.config import get_settings
from app.services.filters import ProductFilter


def matching_names(session, product_filter):
    stmt = select(Product.name).where(*product_filter.criteria()).order_by(Product.name)
    return list(session.scalars(stmt).all())


def test_default_price_range_is_not_zero_width():
    """Test absent bounds mean 0..sentinel, not an empty range."""
    product_filter = ProductFilter()

    assert product_filter.min_price == get_settings().DEFAULT_MIN_PRICE == 0
    assert product_filter.max_price == get_settings().DEFAULT_MAX_PRICE == 1_000_000


def test_default_price_range_follows_settings():
    """Test filter defaults are read from the current settings."""
    configured = get_settings().model_copy(update={"DEFAULT_MIN_PRICE": 5, "DEFAULT_MAX_PRICE": 500})

    with patch("app.services.filters.get_settings", return_value=configured):
        product_filter = ProductFilter()

    assert (product_filter.min_price, product_filter.max_price) == (5, 500)


def test_price_bounds_are_inclusive(db_session, seed):
    """Test products priced exactly at either bound are included."""
    store = seed.store()
    for name, price in [("below", 9.99), ("at-min", 10), ("middle", 30), ("at-max", 50), ("above", 50.01)]:
        seed.product(store, name=name, price=price)

    names = matching_names(db_session, ProductFilter(min_price=10, max_price=50))

    assert names == ["at-max", "at-min", "middle"]


def test_category_and_price_compose(db_session, seed):
    """Test category scoping combines with the price range."""
    store = seed.store()
    boots = seed.category("Boots")
    coats = seed.category("Coats")
    seed.product(store, name="Cheap Boot", price=5, categories=[boots])
    seed.product(store, name="Work Boot", price=40, categories=[boots, coats])
    seed.product(store, name="Rain Coat", price=40, categories=[coats])

    names = matching_names(
        db_session, ProductFilter(min_price=10, max_price=100, category_id=boots.id)
    )

    assert names == ["Work Boot"]


def test_store_scoping(db_session, seed):
    """Test store scoping matches the owning store only."""
    first = seed.store("First")
    second = seed.store("Second")
    seed.product(first, name="A")
    seed.product(second, name="B")

    assert matching_names(db_session, ProductFilter(store_id=second.id)) == ["B"]


def test_search_is_case_insensitive_substring(db_session, seed):
    """Test search matches part of the name regardless of case."""
    store = seed.store()
    seed.product(store, name="Work Boot")
    seed.product(store, name="Rain Coat")
    seed.product(store, name="BOOTLEG Jeans")

    names = matching_names(db_session, ProductFilter.for_search("boot"))

    assert names == ["BOOTLEG Jeans", "Work Boot"]


def test_search_escapes_wildcards(db_session, seed):
    """Test LIKE wildcards in the term are matched literally."""
    store = seed.store()
    seed.product(store, name="100% Cotton")
    seed.product(store, name="1000 Threads")

    assert matching_names(db_session, ProductFilter.for_search("100%")) == ["100% Cotton"]


def test_search_ignores_price_range(db_session, seed):
    """Test the search filter does not carry a price constraint."""
    store = seed.store()
    seed.product(store, name="Gold Boot", price=2_000_000)

    assert matching_names(db_session, ProductFilter.for_search("boot")) == ["Gold Boot"]


def test_min_above_max_is_bad_request():
    """Test contradictory bounds are rejected before querying."""
    with pytest.raises(BadRequestError):
        ProductFilter(min_price=50, max_price=10).validate()


def test_blank_search_term_is_bad_request():
    """Test a whitespace-only search term is rejected."""
    with pytest.raises(BadRequestError):
        ProductFilter.for_search("   ").validate()
