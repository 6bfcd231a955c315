"""
Abstract base class for media URL signers.

A signer turns an opaque storage key into a time-limited URL that a browser
or player can fetch. The same signer serves cover images and audio.
"""

from abc import ABC, abstractmethod
from typing import Dict

from shared.constants import DEFAULT_URL_EXPIRES_IN


class MediaURLSigner(ABC):
    """
    Abstract base class for storage backends able to sign object keys.

    All backends (Cloudflare R2, AWS S3, generic S3, local directory) must
    implement this interface.
    """

    @abstractmethod
    def authenticate(self, credentials: Dict[str, str]) -> bool:
        """
        Prepare the backend client.

        Args:
            credentials: Dictionary containing authentication credentials
                        (access_key_id, secret_access_key, endpoint, etc.)

        Returns:
            True if the backend is usable, False otherwise
        """
        pass

    @abstractmethod
    def sign(self, storage_key: str, expires_in: int = DEFAULT_URL_EXPIRES_IN) -> str:
        """
        Get a fetchable URL for a stored object.

        Args:
            storage_key: Key (path) of the object in the bucket
            expires_in: Expiration time in seconds

        Returns:
            URL string

        Raises:
            MediaResolutionError: If the URL cannot be produced
        """
        pass
