# storefront_http_api/container.py

from dependency_injector import containers, providers

from storefront_http_api.config import get_settings
from storefront_http_api.db.session import build_session_factory, init_engine
from storefront_http_api.services import PostsService, ProductsService, TaxonomyService
from storefront_http_api.storage import init_storage_gateway


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.

    One container per application instance. Resources (engine, storage
    client) are initialized at startup and shut down with the app; services
    are built per request around that request's session.
    """

    # 1. Configuration
    # Wrapped in a provider so tests can override it with their own Settings.
    settings = providers.Singleton(get_settings)

    # 2. Infrastructure resources
    engine = providers.Resource(
        init_engine,
        database_url=settings.provided.DATABASE_URL,
        create_tables=settings.provided.AUTO_CREATE_TABLES,
    )

    session_factory = providers.Singleton(build_session_factory, engine=engine)

    storage_gateway = providers.Resource(init_storage_gateway, settings=settings)

    # 3. Services
    # Factory: a new instance per request; callers pass ``session=``.
    posts_service = providers.Factory(
        PostsService,
        storage=storage_gateway,
        settings=settings,
    )

    products_service = providers.Factory(
        ProductsService,
        storage=storage_gateway,
        settings=settings,
    )

    taxonomy_service = providers.Factory(TaxonomyService)
