from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends

from boutique.clients.store import DocumentStoreClient
from boutique.config import Settings, get_settings
from boutique.services import BillingService

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_store_client_cached() -> DocumentStoreClient:
    settings = get_settings()
    logger.debug("Building document store client for %s", settings.store_base_url)
    return DocumentStoreClient(
        settings.store_base_url,
        timeout=settings.store_timeout,
        use_mock_data=settings.use_mock_data,
        token=settings.store_token,
    )


def get_store_client(settings: Settings = Depends(get_settings)) -> DocumentStoreClient:
    return get_store_client_cached()


def get_billing_service(
    client: DocumentStoreClient = Depends(get_store_client),
    settings: Settings = Depends(get_settings),
) -> BillingService:
    return BillingService(client, settings=settings)
