"""
Runtime configuration.

Values come from the environment, with a ``.env`` file in the working
directory loaded first.
"""

import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from shared.constants import (
    DEFAULT_API_HOST,
    DEFAULT_API_PORT,
    DEFAULT_MEDIA_DIR,
    DEFAULT_SONGS_PATH,
    DEFAULT_URL_EXPIRES_IN,
)
from shared.models import StorageProvider

load_dotenv()

# Library
SONGS_FILE = Path(os.getenv("SOUNDGRID_SONGS_FILE", DEFAULT_SONGS_PATH)).expanduser()

# API
API_HOST = os.getenv("SOUNDGRID_API_HOST", DEFAULT_API_HOST)
API_PORT = int(os.getenv("SOUNDGRID_API_PORT", str(DEFAULT_API_PORT)))
SECRET_KEY = os.getenv("SOUNDGRID_SECRET_KEY") or os.urandom(24).hex()

# Logging
LOG_LEVEL = os.getenv("SOUNDGRID_LOG_LEVEL", "INFO").upper()


@dataclass
class StorageConfig:
    """
    Media storage settings used to sign thumbnail and audio keys.

    For the local provider ``endpoint`` is the media root directory.
    """
    provider: StorageProvider
    endpoint: Optional[str] = None
    bucket: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    region: Optional[str] = None
    url_expires_in: int = DEFAULT_URL_EXPIRES_IN

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['provider'] = self.provider.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StorageConfig':
        """Create StorageConfig from dictionary, filtering unknown keys."""
        field_names = {f.name for f in fields(cls)}
        filtered_data = {k: v for k, v in data.items() if k in field_names}
        filtered_data['provider'] = StorageProvider(filtered_data['provider'])
        if 'url_expires_in' in filtered_data:
            filtered_data['url_expires_in'] = int(filtered_data['url_expires_in'])
        return cls(**filtered_data)

    @classmethod
    def from_env(cls) -> 'StorageConfig':
        provider = os.getenv("SOUNDGRID_STORAGE_PROVIDER", StorageProvider.LOCAL.value)
        endpoint = os.getenv("SOUNDGRID_STORAGE_ENDPOINT")
        if provider == StorageProvider.LOCAL.value and not endpoint:
            endpoint = DEFAULT_MEDIA_DIR
        return cls.from_dict({
            'provider': provider,
            'endpoint': endpoint,
            'bucket': os.getenv("SOUNDGRID_STORAGE_BUCKET"),
            'access_key_id': os.getenv("SOUNDGRID_STORAGE_ACCESS_KEY_ID"),
            'secret_access_key': os.getenv("SOUNDGRID_STORAGE_SECRET_ACCESS_KEY"),
            'region': os.getenv("SOUNDGRID_STORAGE_REGION"),
            'url_expires_in': os.getenv("SOUNDGRID_URL_EXPIRES_IN", str(DEFAULT_URL_EXPIRES_IN)),
        })
