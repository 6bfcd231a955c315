"""Media storage: signers for storage keys and the async URL resolver."""

from .storage_provider import MediaURLSigner
from .provider_factory import SignerFactory
from .resolver import MediaURLResolver

__all__ = ["MediaURLSigner", "SignerFactory", "MediaURLResolver"]
