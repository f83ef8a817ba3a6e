# tests/test_schemas.py
import pytest

from storefront_http_api.schemas import common
from storefront_http_api.schemas.common import MAX_TAG_LENGTH, clean_tag_names


def test_tag_helpers_are_exported():
    assert {"MAX_TAG_LENGTH", "clean_tag_names"} <= set(common.__all__)


def test_clean_tag_names_strips_and_dedupes():
    assert clean_tag_names([" Premium ", "", "premium", "Budget"]) == ["Premium", "Budget"]
    assert clean_tag_names(None) is None


def test_clean_tag_names_rejects_long_names():
    with pytest.raises(ValueError):
        clean_tag_names(["x" * (MAX_TAG_LENGTH + 1)])
