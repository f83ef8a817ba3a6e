# tests/repositories/test_products_repository.py
import pytest

from storefront_http_api.db import models
from storefront_http_api.repositories import ProductsRepository, TaxonomyRepository
from storefront_http_api.schemas.common import SortKey
from storefront_http_api.schemas.products import ProductListQuery
from tests.conftest import make_category, make_product


@pytest.fixture
def repo(session):
    return ProductsRepository(session)


def test_price_range_and_category_filter(session, repo):
    tech = make_category(session, "Tech")
    home = make_category(session, "Home")
    for price in (10, 25, 40, 60):
        make_product(session, f"Tech {price}", price=price, category=tech)
    make_product(session, "Home 30", price=30, category=home)

    page = repo.list_active(ProductListQuery(category="tech", min_price=20, max_price=50))

    assert {p.price for p in page.items} == {25, 40}
    assert page.total == 2


def test_bounds_are_inclusive(session, repo):
    for price in (20, 50):
        make_product(session, f"Edge {price}", price=price)

    page = repo.list_active(ProductListQuery(min_price=20, max_price=50))

    assert page.total == 2


def test_inactive_products_never_listed(session, repo):
    make_product(session, "On sale")
    make_product(session, "Retired", status=models.ProductStatus.DISCONTINUED)
    make_product(session, "Paused", status=models.ProductStatus.INACTIVE)

    page = repo.list_active(ProductListQuery())

    assert [p.name for p in page.items] == ["On sale"]


def test_featured_only_restricts_when_true(session, repo):
    make_product(session, "Star", featured=True)
    make_product(session, "Plain", featured=False)

    assert repo.list_active(ProductListQuery(featured=True)).total == 1
    assert repo.list_active(ProductListQuery(featured=False)).total == 2
    assert repo.list_active(ProductListQuery(featured=None)).total == 2


def test_search_treats_wildcards_literally(session, repo):
    make_product(session, "Plain Mug", description="A plain white mug, one cup size.")
    make_product(session, "Sale Mug", description="Same mug, now 50% off.")
    make_product(session, "Snake_Case Tee", description="Cotton tee with a printed slogan.")

    percent = repo.list_active(ProductListQuery(search="%"))
    underscore = repo.list_active(ProductListQuery(search="e_c"))

    assert [p.name for p in percent.items] == ["Sale Mug"]
    assert [p.name for p in underscore.items] == ["Snake_Case Tee"]


def test_min_rating_filter(session, repo):
    make_product(session, "Loved", average_rating=4.6, review_count=3)
    make_product(session, "Meh", average_rating=2.0, review_count=1)

    page = repo.list_active(ProductListQuery(min_rating=4))

    assert [p.name for p in page.items] == ["Loved"]


@pytest.mark.parametrize(
    "sort, expected",
    [
        (SortKey.PRICE_ASC, ["Cheap", "Middle", "Pricey"]),
        (SortKey.PRICE_DESC, ["Pricey", "Middle", "Cheap"]),
        (SortKey.NAME, ["Cheap", "Middle", "Pricey"]),
        (SortKey.RATING, ["Middle", "Pricey", "Cheap"]),
    ],
)
def test_sort_keys(session, repo, sort, expected):
    make_product(session, "Pricey", price=300, average_rating=3.0)
    make_product(session, "Cheap", price=3, average_rating=1.0)
    make_product(session, "Middle", price=30, average_rating=5.0)

    page = repo.list_active(ProductListQuery(sort=sort))

    assert [p.name for p in page.items] == expected


def test_list_featured_is_active_featured_newest_first(session, repo):
    make_product(session, "Old star", featured=True)
    make_product(session, "Hidden star", featured=True, status=models.ProductStatus.INACTIVE)
    make_product(session, "New star", featured=True)
    make_product(session, "Plain")

    featured = repo.list_featured(limit=8)

    assert [p.name for p in featured] == ["New star", "Old star"]


def test_next_image_position_appends(session, repo):
    product = make_product(session, "Lamp")
    assert repo.next_image_position(product.id) == 0

    product.images.append(models.ProductImage(url="https://x.test/a.png", position=0))
    product.images.append(models.ProductImage(url="https://x.test/b.png", position=1))
    session.commit()

    assert repo.next_image_position(product.id) == 2


def test_get_or_create_tags_reuses_existing_slugs(session):
    taxonomy = TaxonomyRepository(session)
    first = taxonomy.get_or_create_tags(["Best Seller", "premium"])
    session.commit()

    second = taxonomy.get_or_create_tags(["best-seller", "Premium", "New"])

    assert [t.slug for t in first] == ["best-seller", "premium"]
    assert [t.id for t in second[:2]] == [t.id for t in first]
    assert second[2].slug == "new"
