"""Tests for the product repository."""
import pytest
from datetime import date
from decimal import Decimal

from grocery.domain import Product
from grocery.repositories import ProductRepository


def snapshot(products):
    return [p.model_dump() for p in products]


def test_seed_data(product_repository):
    """Test that construction seeds and caches the catalog."""
    products = product_repository.get_all()
    assert [p.name for p in products] == ["Melk", "Kaas", "Brood", "Cornflakes"]

    melk = products[0]
    assert melk.id == 1
    assert melk.stock == 300
    assert melk.shelf_life == date(2025, 9, 25)
    assert melk.price == Decimal("0.95")
    assert snapshot(product_repository.cached) == snapshot(products)


def test_bootstrap_is_idempotent(connection, product_repository, count_rows):
    """Test that constructing again leaves existing rows alone."""
    melk = product_repository.get(1)
    melk.stock = 12
    assert product_repository.update(melk) is melk

    again = ProductRepository(connection)

    assert count_rows("Product") == 4
    assert again.get(1).stock == 12


@pytest.mark.parametrize("product_id", [0, -1])
def test_get_non_positive_id(product_repository, product_id):
    """Test that non-positive ids are not looked up."""
    assert product_repository.get(product_id) is None


def test_get_missing(product_repository):
    """Test getting a product that does not exist."""
    assert product_repository.get(999) is None


def test_add_round_trip(product_repository, new_product):
    """Test adding a product and reading it back."""
    added = product_repository.add(new_product)

    assert added is new_product
    assert added.id > 4
    assert product_repository.get(added.id) == added
    assert any(p is added for p in product_repository.cached)


def test_add_keeps_cache_consistent(product_repository, new_product):
    """Test that the cache matches the table after an add."""
    product_repository.add(new_product)
    cached = snapshot(product_repository.cached)
    assert cached == snapshot(product_repository.get_all())
    assert len(cached) == 5


def test_update_mutates_cached_entry(product_repository):
    """Test that holders of the cached product observe an update."""
    cached_kaas = product_repository.get_all()[1]

    kaas = product_repository.get(2)
    kaas.stock = 42
    kaas.price = Decimal("8.49")
    result = product_repository.update(kaas)

    assert result is kaas
    assert cached_kaas is not kaas
    assert cached_kaas.stock == 42
    assert cached_kaas.price == Decimal("8.49")
    assert product_repository.get(2).stock == 42


def test_update_keeps_cache_consistent(product_repository):
    """Test that the cache matches the table after an update."""
    brood = product_repository.get(3)
    brood.name = "Volkorenbrood"
    product_repository.update(brood)

    cached = snapshot(product_repository.cached)
    assert cached == snapshot(product_repository.get_all())


def test_update_unsaved_product(product_repository, new_product):
    """Test that a product without id cannot be updated."""
    assert product_repository.update(new_product) is None


def test_update_stale_id(product_repository, new_product):
    """Test that updating a product whose row is gone returns None."""
    new_product.id = 999
    assert product_repository.update(new_product) is None
    assert product_repository.get(999) is None


def test_update_storage_failure(product_repository, fail_on):
    """Test that a failing store leaves product and cache untouched."""
    fail_on("UPDATE", "Product")
    cached_before = snapshot(product_repository.cached)

    melk = product_repository.get(1)
    melk.stock = 1
    assert product_repository.update(melk) is None

    assert product_repository.get(1).stock == 300
    assert snapshot(product_repository.cached) == cached_before


def test_delete(product_repository):
    """Test deleting a product."""
    cornflakes = product_repository.get(4)

    assert product_repository.delete(cornflakes) is cornflakes
    assert product_repository.get(4) is None
    assert 4 not in [p.id for p in product_repository.cached]
    assert snapshot(product_repository.cached) == snapshot(product_repository.get_all())

    # Second delete finds nothing
    assert product_repository.delete(cornflakes) is None


def test_delete_unsaved_product(product_repository, new_product, count_rows):
    """Test that a product without id is not deleted."""
    assert product_repository.delete(new_product) is None
    assert count_rows("Product") == 4


def test_add_storage_failure(product_repository, new_product, fail_on, count_rows):
    """Test that a failing insert leaves the product unsaved."""
    fail_on("INSERT", "Product")

    assert product_repository.add(new_product) is None
    assert new_product.id == 0
    assert count_rows("Product") == 4
    assert len(product_repository.cached) == 4
