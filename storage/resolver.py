"""Async resolution of storage keys into short-lived media URLs."""

import asyncio
import logging
from typing import Optional

from shared.constants import DEFAULT_URL_EXPIRES_IN
from shared.errors import MediaResolutionError
from .storage_provider import MediaURLSigner

logger = logging.getLogger(__name__)


class MediaURLResolver:
    """
    Turns storage keys into fetchable URLs through a signer.

    Every call signs again; URLs are never cached across renders. Signers are
    blocking, so they run in a worker thread and the event loop only awaits
    the result.
    """

    def __init__(self, signer: MediaURLSigner, expires_in: int = DEFAULT_URL_EXPIRES_IN):
        self._signer = signer
        self.expires_in = expires_in

    async def resolve(self, storage_key: str) -> str:
        """
        Sign one key.

        Raises:
            MediaResolutionError: If the key is empty or the signer fails
        """
        if not storage_key:
            raise MediaResolutionError(storage_key, "empty storage key")
        try:
            url = await asyncio.to_thread(self._signer.sign, storage_key, self.expires_in)
        except MediaResolutionError:
            raise
        except Exception as e:
            raise MediaResolutionError(storage_key, str(e)) from e
        if not url:
            raise MediaResolutionError(storage_key, "signer returned no URL")
        logger.debug("Signed %s (expires in %ss)", storage_key, self.expires_in)
        return url

    async def resolve_optional(self, storage_key: Optional[str]) -> Optional[str]:
        """Like resolve(), but a missing key yields None without touching the signer."""
        if not storage_key:
            return None
        return await self.resolve(storage_key)
