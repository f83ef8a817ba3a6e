# storefront_http_api/seed.py

"""
Seed the database with starter categories, tags, posts and products.

Idempotent: rows are matched by slug and only missing ones are inserted,
so the command can be re-run against a populated database.

Usage:
    python -m storefront_http_api.seed                      # uses DATABASE_URL
    python -m storefront_http_api.seed --database-url sqlite:///./dev.db
    python -m storefront_http_api.seed --author-id admin-1
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront_http_api.config import get_settings
from storefront_http_api.db import Base, build_engine, build_session_factory, db_session
from storefront_http_api.db import models
from storefront_http_api.db.models import utcnow
from storefront_http_api.logging import configure_logging, get_logger

logger = get_logger(__name__)


# --------------------------------------------------------------------------------------
# 1. Starter data
# --------------------------------------------------------------------------------------

CATEGORIES: List[Dict[str, str]] = [
    {"name": "Technology", "slug": "technology", "description": "Latest tech gadgets and reviews"},
    {"name": "Home & Garden", "slug": "home-garden", "description": "Home improvement and garden products"},
    {"name": "Sports & Outdoors", "slug": "sports-outdoors", "description": "Sports equipment and outdoor gear"},
]

TAGS: List[Dict[str, str]] = [
    {"name": "Bestseller", "slug": "bestseller"},
    {"name": "Budget Friendly", "slug": "budget-friendly"},
    {"name": "Premium", "slug": "premium"},
]

POSTS: List[Dict[str, Any]] = [
    {
        "title": "Top 5 Tech Gadgets for 2025",
        "slug": "top-5-tech-gadgets-2025",
        "content": (
            "<p>In this comprehensive review, we explore the 5 best tech gadgets that will "
            "revolutionize your daily life in 2025.</p>"
            "<h2>1. Smart Home Hub Pro</h2>"
            "<p>The latest smart home hub offers unmatched compatibility and ease of use.</p>"
            "<h2>2. Wireless Earbuds X3</h2>"
            "<p>Experience crystal-clear audio with adaptive noise cancellation.</p>"
            "<h2>3. Portable Phone Charger 20000mAh</h2>"
            "<p>Never worry about battery life again with our recommended power banks.</p>"
        ),
        "excerpt": (
            "Discover the top 5 tech gadgets that will transform your 2025. "
            "Expert reviews and buying guides inside."
        ),
        "category": "technology",
        "tags": ["bestseller", "premium"],
        "views": 150,
    },
    {
        "title": "Home Garden Tips for Beginners",
        "slug": "home-garden-tips-beginners",
        "content": (
            "<p>Starting a home garden doesn't have to be complicated. "
            "Follow these simple steps to get started.</p>"
            "<h2>Getting Started</h2>"
            "<ul><li>Choose the right location</li><li>Prepare your soil</li>"
            "<li>Select easy-to-grow plants</li></ul>"
        ),
        "excerpt": "Learn how to start your home garden with our beginner-friendly guide.",
        "category": "home-garden",
        "tags": [],
        "views": 320,
    },
    {
        "title": "Best Outdoor Hiking Gear 2025",
        "slug": "best-outdoor-hiking-gear",
        "content": (
            "<p>Planning a hiking adventure? Read our complete guide to the best hiking gear "
            "available.</p>"
            "<h2>Essential Hiking Gear</h2>"
            "<ul><li>Quality hiking boots</li><li>Weather-appropriate clothing</li>"
            "<li>Reliable backpack</li><li>Navigation tools</li></ul>"
        ),
        "excerpt": "Complete guide to choosing the best hiking gear for your outdoor adventures.",
        "category": "sports-outdoors",
        "tags": [],
        "views": 240,
    },
]

PRODUCTS: List[Dict[str, Any]] = [
    {
        "name": "Smart Home Hub Pro",
        "slug": "smart-home-hub-pro",
        "description": (
            "Advanced smart home hub with support for 100+ devices. "
            "Control your entire home from your smartphone."
        ),
        "price": 99.99,
        "original_price": 149.99,
        "brand": "TechVision",
        "quantity": 45,
        "sku": "SHH-PRO-001",
        "featured": True,
        "meta_title": "Smart Home Hub Pro - Control Your Home",
        "meta_description": "Advanced smart home hub supporting 100+ devices.",
        "category": "technology",
        "tags": ["bestseller", "premium"],
    },
    {
        "name": "Wireless Earbuds X3",
        "slug": "wireless-earbuds-x3",
        "description": "Premium wireless earbuds with active noise cancellation and 8-hour battery life.",
        "price": 79.99,
        "original_price": 119.99,
        "brand": "AudioMax",
        "quantity": 120,
        "sku": "WE-X3-002",
        "featured": True,
        "meta_title": "Wireless Earbuds X3 - Best Budget ANC Earbuds",
        "meta_description": "Premium wireless earbuds with ANC and 8-hour battery.",
        "category": "technology",
        "tags": ["budget-friendly"],
    },
    {
        "name": "Professional Gardening Tool Set",
        "slug": "professional-gardening-tool-set",
        "description": (
            "Complete 12-piece gardening tool set with ergonomic handles "
            "and stainless steel construction."
        ),
        "price": 49.99,
        "original_price": 79.99,
        "brand": "GreenThumb",
        "quantity": 85,
        "sku": "GT-SET-003",
        "featured": True,
        "meta_title": "Professional Gardening Tool Set - 12 Pieces",
        "meta_description": "Complete gardening tool set with ergonomic handles.",
        "category": "home-garden",
        "tags": [],
    },
    {
        "name": "Portable Hiking Backpack 50L",
        "slug": "portable-hiking-backpack-50l",
        "description": (
            "Durable 50-liter hiking backpack with rain cover, hydration bladder "
            "compatibility, and ergonomic design."
        ),
        "price": 89.99,
        "original_price": 129.99,
        "brand": "TrailMaster",
        "quantity": 60,
        "sku": "HB-50L-004",
        "featured": True,
        "meta_title": "50L Hiking Backpack - Perfect for Long Treks",
        "meta_description": "Professional-grade 50L hiking backpack with rain cover.",
        "category": "sports-outdoors",
        "tags": ["premium"],
    },
    {
        "name": "Portable Phone Charger 20000mAh",
        "slug": "portable-phone-charger-20000mah",
        "description": "Fast-charging 20000mAh portable power bank with dual USB-C ports and LED display.",
        "price": 34.99,
        "original_price": 49.99,
        "brand": "PowerPulse",
        "quantity": 200,
        "sku": "PC-20K-005",
        "featured": False,
        "meta_title": "20000mAh Portable Charger - Fast Charging",
        "meta_description": "High-capacity portable charger with dual USB-C.",
        "category": "technology",
        "tags": ["budget-friendly"],
    },
]


# --------------------------------------------------------------------------------------
# 2. Upserts
# --------------------------------------------------------------------------------------


def _by_slug(session: Session, model, slug: str):
    return session.execute(select(model).where(model.slug == slug)).scalar_one_or_none()


def seed_database(session: Session, *, author_id: str = "admin") -> Dict[str, int]:
    """
    Insert whatever starter rows are missing. Returns the number created per kind.
    """
    created = {"categories": 0, "tags": 0, "posts": 0, "products": 0}

    categories: Dict[str, models.Category] = {}
    for data in CATEGORIES:
        category = _by_slug(session, models.Category, data["slug"])
        if category is None:
            category = models.Category(**data)
            session.add(category)
            created["categories"] += 1
        categories[data["slug"]] = category

    tags: Dict[str, models.Tag] = {}
    for data in TAGS:
        tag = _by_slug(session, models.Tag, data["slug"])
        if tag is None:
            tag = models.Tag(**data)
            session.add(tag)
            created["tags"] += 1
        tags[data["slug"]] = tag

    session.flush()

    for data in POSTS:
        if _by_slug(session, models.Post, data["slug"]) is not None:
            continue
        fields = {k: v for k, v in data.items() if k not in ("category", "tags")}
        session.add(
            models.Post(
                **fields,
                status=models.PostStatus.PUBLISHED,
                author_id=author_id,
                category=categories[data["category"]],
                tags=[tags[slug] for slug in data["tags"]],
                published_at=utcnow(),
            )
        )
        created["posts"] += 1

    for data in PRODUCTS:
        if _by_slug(session, models.Product, data["slug"]) is not None:
            continue
        fields = {k: v for k, v in data.items() if k not in ("category", "tags")}
        session.add(
            models.Product(
                **fields,
                status=models.ProductStatus.ACTIVE,
                category=categories[data["category"]],
                tags=[tags[slug] for slug in data["tags"]],
                attributes=[],
                variants=[],
                meta_keywords=[],
                average_rating=0.0,
                review_count=0,
            )
        )
        created["products"] += 1

    session.flush()
    return created


# --------------------------------------------------------------------------------------
# 3. CLI
# --------------------------------------------------------------------------------------


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the storefront database with starter content.")
    parser.add_argument("--database-url", default=None, help="Defaults to DATABASE_URL.")
    parser.add_argument("--author-id", default="admin", help="Author id assigned to seeded posts.")
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    engine = build_engine(args.database_url or settings.DATABASE_URL)
    try:
        Base.metadata.create_all(engine)
        with db_session(build_session_factory(engine)) as session:
            created = seed_database(session, author_id=args.author_id)
    finally:
        engine.dispose()

    logger.info("seed_completed", **created)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
