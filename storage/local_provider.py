"""
Local filesystem media signer.
Serves media straight from a directory, for development and self-hosting.
"""

from pathlib import Path
from typing import Dict, Optional

from shared.constants import DEFAULT_URL_EXPIRES_IN
from shared.errors import MediaResolutionError
from .storage_provider import MediaURLSigner


class LocalMediaSigner(MediaURLSigner):
    """
    Signer that maps keys to ``file://`` URLs under a base directory.
    Local URLs do not expire; ``expires_in`` is accepted and ignored.
    """

    def __init__(self):
        self.base_path: Optional[Path] = None
        self.bucket_name: Optional[str] = None

    def authenticate(self, credentials: Dict[str, str]) -> bool:
        """
        'Authenticate' by setting the base path.
        The 'base_path' or 'endpoint' is the media root directory.
        """
        path = credentials.get('base_path') or credentials.get('endpoint')
        if not path:
            return False

        self.base_path = Path(path).expanduser().absolute()
        self.bucket_name = credentials.get('bucket')
        return True

    def _get_path(self, storage_key: str) -> Path:
        """Get absolute local path for a storage key."""
        if self.base_path is None:
            raise MediaResolutionError(storage_key, "media root not set")

        root = self.base_path
        if self.bucket_name not in (None, ".", "", "default"):
            root = root / self.bucket_name

        path = (root / storage_key).resolve()
        if root.resolve() not in path.parents:
            raise MediaResolutionError(storage_key, "key escapes media root")
        return path

    def sign(self, storage_key: str, expires_in: int = DEFAULT_URL_EXPIRES_IN) -> str:
        """Return a file:// URL for the key."""
        path = self._get_path(storage_key)
        if not path.exists():
            raise MediaResolutionError(storage_key, "no such file")
        return path.as_uri()
