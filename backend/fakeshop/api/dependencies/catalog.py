"""Dependencies wiring the product service to its collaborators."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from fakeshop.api.dependencies.db import get_session
from fakeshop.core.config import Settings, get_settings
from fakeshop.db.product_store import LocalProductStore
from fakeshop.external.fakestore import FakestoreClient
from fakeshop.services.products import ProductService


def get_catalog_client(request: Request) -> FakestoreClient:
    """Return the FakeStore client opened in the application lifespan."""
    return request.app.state.catalog_client


def get_product_service(
    db: Session = Depends(get_session),
    catalog: FakestoreClient = Depends(get_catalog_client),
    settings: Settings = Depends(get_settings),
) -> ProductService:
    return ProductService(
        LocalProductStore(db),
        catalog,
        strict_id_allocation=settings.strict_id_allocation,
    )
