"""Tests for the popularity ranking and its refresh task."""
from unittest.mock import MagicMock, patch

import pytest

from app.services.popularity_service import PopularityService
from app.services.storage import StorageQuery
from app.tasks.popularity_tasks import refresh_popular_products


@pytest.fixture
def service(db_session):
    return PopularityService(StorageQuery(db_session))


def test_no_payments_is_empty_ranking(service):
    """Test an empty ledger yields an empty ranking, not an error."""
    assert service.top_popular_products(10) == []


def test_ranking_order_and_tiebreak(service, seed):
    """Test equal counts are ordered by product id on every call."""
    store = seed.store()
    a = seed.product(store, name="A")
    b = seed.product(store, name="B")
    c = seed.product(store, name="C")
    seed.payments(c.id, 3)
    seed.payments(b.id, 5)
    seed.payments(a.id, 5)

    first = service.top_popular_products(10)
    second = service.top_popular_products(10)

    assert [p.name for p in first] == ["A", "B", "C"]
    assert [p.purchases for p in first] == [5, 5, 3]
    assert [p.rank for p in first] == [1, 2, 3]
    assert [p.model_dump() for p in first] == [p.model_dump() for p in second]


def test_ranking_takes_top_n(service, seed):
    """Test only the n most purchased products are returned."""
    store = seed.store()
    for i, count in enumerate([1, 4, 2, 3]):
        product = seed.product(store, name=f"P{i}")
        seed.payments(product.id, count)

    ranked = service.top_popular_products(2)

    assert [p.name for p in ranked] == ["P1", "P3"]


def test_ranking_enriched_with_catalog_fields(service, seed):
    """Test ranked products carry catalog fields and exactly one image."""
    store = seed.store()
    boot = seed.product(
        store, name="Work Boot", price=80, size="42", brand_name="Acme", description="Steel toe"
    )
    coat = seed.product(store, name="Rain Coat")
    seed.product_image(boot, "boot-1.jpg")
    seed.product_image(boot, "boot-2.jpg")
    seed.payments(boot.id, 2)
    seed.payments(coat.id, 1)

    boot_entry, coat_entry = service.top_popular_products(10)

    assert boot_entry.product_id == boot.id
    assert boot_entry.price == 80
    assert boot_entry.size == "42"
    assert boot_entry.brand_name == "Acme"
    assert boot_entry.description == "Steel toe"
    assert boot_entry.image == "boot-1.jpg"
    assert coat_entry.image is None


def test_deleted_products_are_dropped(service, seed, db_session):
    """Test ledger entries of deleted products are skipped without an error."""
    store = seed.store()
    gone = seed.product(store, name="Gone")
    kept = seed.product(store, name="Kept")
    seed.payments(gone.id, 9)
    seed.payments(kept.id, 1)

    db_session.delete(gone)
    db_session.commit()

    ranked = service.top_popular_products(10)

    assert [p.name for p in ranked] == ["Kept"]
    assert ranked[0].rank == 1


def test_cached_ranking_is_served_from_cache(db_session):
    """Test a cache hit skips the database entirely."""
    cache = MagicMock()
    cache.get.return_value = [
        {"rank": 1, "product_id": 7, "purchases": 3, "name": "Cached", "price": 1.0}
    ]
    db = MagicMock()
    service = PopularityService(StorageQuery(db), cache=cache)

    ranked = service.top_popular_products(5)

    assert ranked[0].name == "Cached"
    cache.get.assert_called_once_with("popular", "5")
    db.execute.assert_not_called()


def test_cache_miss_stores_ranking(db_session, seed):
    """Test a cache miss computes the ranking and stores it."""
    store = seed.store()
    product = seed.product(store, name="Boot")
    seed.payments(product.id, 2)
    cache = MagicMock()
    cache.get.return_value = None
    service = PopularityService(StorageQuery(db_session), cache=cache, ttl=60)

    ranked = service.top_popular_products(3)

    assert [p.name for p in ranked] == ["Boot"]
    prefix, key, value, ttl = cache.set.call_args.args
    assert (prefix, key, ttl) == ("popular", "3", 60)
    assert value[0]["name"] == "Boot"


def test_refresh_task_recomputes_ranking(db_session, seed):
    """Test the refresh task invalidates and recomputes the ranking."""
    store = seed.store()
    product = seed.product(store, name="Boot")
    seed.payments(product.id, 4)
    cache = MagicMock()
    cache.get.return_value = None
    cache.delete_pattern.return_value = 2

    with patch("app.tasks.popularity_tasks.SessionLocal", return_value=db_session), \
            patch("app.tasks.popularity_tasks.get_cache", return_value=cache):
        result = refresh_popular_products(n=5)

    assert result == {"status": "success", "n": 5, "ranked": 1, "invalidated": 2}
    cache.delete_pattern.assert_called_once_with("popular:*")


def test_unreadable_cache_entry_is_recomputed(db_session, seed):
    """Test a cached ranking that no longer fits the schema is replaced."""
    store = seed.store()
    product = seed.product(store, name="Boot")
    seed.payments(product.id, 2)
    cache = MagicMock()
    cache.get.return_value = [{"productId": 1}]
    service = PopularityService(StorageQuery(db_session), cache=cache)

    ranked = service.top_popular_products(10)

    assert [p.name for p in ranked] == ["Boot"]
    prefix, key, value, _ = cache.set.call_args.args
    assert (prefix, key) == ("popular", "10")
    assert value[0]["name"] == "Boot"
