"""
Factory for creating media signer instances.

Simplifies backend selection and initialization.
"""

from shared.config import StorageConfig
from shared.models import StorageProvider
from .storage_provider import MediaURLSigner
from .s3_signer import S3MediaSigner
from .local_provider import LocalMediaSigner


class SignerFactory:
    """Factory for creating media signer instances."""

    @staticmethod
    def create(provider_type: StorageProvider) -> MediaURLSigner:
        """
        Create a signer instance.

        Args:
            provider_type: Type of backend to create

        Returns:
            Signer instance

        Raises:
            ValueError: If provider type is not supported
        """
        if provider_type == StorageProvider.CLOUDFLARE_R2:
            return S3MediaSigner(r2=True)

        elif provider_type in (StorageProvider.AWS_S3, StorageProvider.GENERIC_S3):
            return S3MediaSigner()

        elif provider_type == StorageProvider.LOCAL:
            return LocalMediaSigner()

        else:
            raise ValueError(f"Unknown provider type: {provider_type}")

    @staticmethod
    def from_config(config: StorageConfig) -> MediaURLSigner:
        """
        Create and authenticate a signer from storage settings.

        Raises:
            ValueError: If the backend rejects the settings
        """
        signer = SignerFactory.create(config.provider)
        creds = {
            'access_key_id': config.access_key_id,
            'secret_access_key': config.secret_access_key,
            'endpoint': config.endpoint,
            'region': config.region,
            'bucket': config.bucket,
        }
        if config.provider == StorageProvider.LOCAL:
            creds = {'base_path': config.endpoint, 'bucket': config.bucket}

        if not signer.authenticate(creds):
            raise ValueError(
                f"Could not initialise {SignerFactory.get_provider_name(config.provider)} signer"
            )
        return signer

    @staticmethod
    def get_provider_name(provider_type: StorageProvider) -> str:
        """Get human-readable provider name."""
        names = {
            StorageProvider.CLOUDFLARE_R2: "Cloudflare R2",
            StorageProvider.AWS_S3: "Amazon S3",
            StorageProvider.GENERIC_S3: "Generic S3-Compatible",
            StorageProvider.LOCAL: "Local Directory",
        }
        return names.get(provider_type, "Unknown")
