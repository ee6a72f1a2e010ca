"""
Process-wide handles for the document store and identity provider.

Both accessors are memoised and return ``None`` when their backend is not
configured; callers treat ``None`` as a normal, checked condition.
"""

import logging
from functools import lru_cache
from typing import Optional

from tripplanner.auth.identity import LocalIdentityProvider
from tripplanner.core.config import settings
from tripplanner.storage.document_store import InMemoryDocumentStore, JsonFileDocumentStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_document_store() -> Optional[InMemoryDocumentStore]:
    kind = (settings.document_store or "").strip().lower()
    if kind == "memory":
        return InMemoryDocumentStore()
    if kind == "json":
        return JsonFileDocumentStore(settings.store_path)
    if kind:
        logger.warning("Unknown DOCUMENT_STORE %r, store disabled", kind)
    return None


@lru_cache()
def get_identity_provider() -> Optional[LocalIdentityProvider]:
    kind = (settings.identity_provider or "").strip().lower()
    if kind == "local":
        return LocalIdentityProvider()
    if kind:
        logger.warning("Unknown IDENTITY_PROVIDER %r, auth disabled", kind)
    return None
