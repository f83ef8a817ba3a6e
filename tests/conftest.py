# tests/conftest.py
from typing import Dict, List, Optional, Set, Tuple

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from storefront_http_api.config import AppEnv, Settings, StorageBackend
from storefront_http_api.container import Container
from storefront_http_api.db import Base, build_engine, build_session_factory
from storefront_http_api.db import models
from storefront_http_api.db.models import utcnow
from storefront_http_api.errors import UploadError
from storefront_http_api.main import create_app
from storefront_http_api.services import PostsService, ProductsService, TaxonomyService
from storefront_http_api.storage import IncomingFile, StorageGateway

PUBLIC_BASE = "https://cdn.example.test/storage/v1/object/public"

ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}
AUTHOR = {"X-User-Id": "author-1", "X-User-Role": "user"}
READER = {"X-User-Id": "reader-1", "X-User-Role": "user"}

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class RecordingStorage(StorageGateway):
    """
    In-memory gateway that records every call.

    ``fail_uploads`` makes every put fail; paths listed in
    ``fail_delete_paths`` fail on delete.
    """

    def __init__(self) -> None:
        super().__init__(PUBLIC_BASE)
        self.objects: Dict[Tuple[str, str], bytes] = {}
        self.uploaded: List[Tuple[str, str]] = []
        self.deleted: List[Tuple[str, str]] = []
        self.fail_uploads = False
        self.fail_delete_paths: Set[str] = set()

    def _put(self, bucket: str, path: str, data: bytes, content_type: str) -> None:
        if self.fail_uploads:
            raise UploadError("Upload failed: storage unavailable")
        self.objects[(bucket, path)] = data
        self.uploaded.append((bucket, path))

    def _remove(self, bucket: str, path: str) -> None:
        self.deleted.append((bucket, path))
        if path in self.fail_delete_paths:
            raise UploadError("Delete failed: storage unavailable")
        self.objects.pop((bucket, path), None)

    def health_check(self) -> bool:
        return True


def png(name: str = "photo.png") -> IncomingFile:
    return IncomingFile(filename=name, content_type="image/png", data=PNG)


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        APP_ENV=AppEnv.TESTING,
        DATABASE_URL="sqlite://",
        STORAGE_BACKEND=StorageBackend.FILESYSTEM,
        FILESYSTEM_STORAGE_PATH=str(tmp_path / "media"),
        STORAGE_PUBLIC_BASE_URL=PUBLIC_BASE,
        LOG_FORMAT="console",
        LOG_LEVEL="WARNING",
        API_SECRET=None,
    )


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture
def posts_service(session, storage, settings) -> PostsService:
    return PostsService(session, storage, settings)


@pytest.fixture
def products_service(session, storage, settings) -> ProductsService:
    return ProductsService(session, storage, settings)


@pytest.fixture
def taxonomy_service(session) -> TaxonomyService:
    return TaxonomyService(session)


@pytest.fixture
def container(settings, engine, storage):
    """
    Container with the database engine and the storage gateway replaced by
    test doubles.
    """
    container = Container()
    container.settings.override(providers.Object(settings))
    container.engine.override(providers.Object(engine))
    container.storage_gateway.override(providers.Object(storage))
    yield container
    container.reset_override()


@pytest.fixture
def client(container):
    app = create_app(container=container)
    with TestClient(app) as c:
        yield c


# ---------------------------------------------------------------------------
# Data builders
# ---------------------------------------------------------------------------


def make_category(session, name: str, slug: Optional[str] = None) -> models.Category:
    category = models.Category(name=name, slug=slug or name.lower().replace(" ", "-"))
    session.add(category)
    session.commit()
    return category


def make_post(
    session,
    title: str,
    *,
    author_id: str = "author-1",
    status: models.PostStatus = models.PostStatus.PUBLISHED,
    category: Optional[models.Category] = None,
    views: int = 0,
    **fields,
) -> models.Post:
    post = models.Post(
        title=title,
        slug=fields.pop("slug", title.lower().replace(" ", "-")),
        content=fields.pop("content", "Some long enough content."),
        status=status,
        author_id=author_id,
        category=category,
        views=views,
        published_at=utcnow() if status == models.PostStatus.PUBLISHED else None,
        **fields,
    )
    session.add(post)
    session.commit()
    return post


def make_product(
    session,
    name: str,
    *,
    price: float = 10.0,
    category: Optional[models.Category] = None,
    status: models.ProductStatus = models.ProductStatus.ACTIVE,
    **fields,
) -> models.Product:
    product = models.Product(
        name=name,
        slug=fields.pop("slug", name.lower().replace(" ", "-")),
        description=fields.pop("description", "A perfectly fine product."),
        price=price,
        category=category,
        status=status,
        attributes=[],
        variants=[],
        meta_keywords=[],
        **fields,
    )
    session.add(product)
    session.commit()
    return product
