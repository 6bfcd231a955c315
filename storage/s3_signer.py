"""
S3-compatible media signer.

Covers Cloudflare R2, AWS S3 and any other S3-compatible service through the
boto3 S3 client. URLs are presigned ``get_object`` requests.
"""

import logging
from typing import Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from shared.constants import (
    AWS_S3_ENDPOINT_TEMPLATE,
    CLOUDFLARE_R2_ENDPOINT_TEMPLATE,
    DEFAULT_URL_EXPIRES_IN,
)
from shared.errors import MediaResolutionError
from .storage_provider import MediaURLSigner

logger = logging.getLogger(__name__)


class S3MediaSigner(MediaURLSigner):
    """
    Presigned URL signer using boto3.

    Signing is a local computation; no request is made to the bucket.
    """

    def __init__(self, r2: bool = False):
        self.r2 = r2
        self.s3_client = None
        self.bucket_name: Optional[str] = None
        self.endpoint_url: Optional[str] = None

    def authenticate(self, credentials: Dict[str, str]) -> bool:
        """
        Create the S3 client.

        Args:
            credentials: Must contain:
                - access_key_id
                - secret_access_key
                - bucket
              and one of:
                - endpoint: full endpoint URL
                - account_id: Cloudflare account ID (R2 only)
                - region: AWS region (AWS S3 only)
        """
        try:
            self.bucket_name = credentials['bucket']
            self.endpoint_url = self._endpoint_for(credentials)
            region = 'auto' if self.r2 else credentials.get('region')

            self.s3_client = boto3.client(
                's3',
                endpoint_url=self.endpoint_url,
                aws_access_key_id=credentials['access_key_id'],
                aws_secret_access_key=credentials['secret_access_key'],
                region_name=region,
            )
            return True
        except (BotoCoreError, KeyError) as e:
            logger.error("S3 signer setup failed: %s", e)
            return False

    def _endpoint_for(self, credentials: Dict[str, str]) -> Optional[str]:
        if credentials.get('endpoint'):
            return credentials['endpoint']
        if self.r2:
            return CLOUDFLARE_R2_ENDPOINT_TEMPLATE.format(account_id=credentials['account_id'])
        if credentials.get('region'):
            return AWS_S3_ENDPOINT_TEMPLATE.format(region=credentials['region'])
        return None

    def sign(self, storage_key: str, expires_in: int = DEFAULT_URL_EXPIRES_IN) -> str:
        """Generate presigned URL for object access."""
        if self.s3_client is None:
            raise MediaResolutionError(storage_key, "signer not authenticated")
        try:
            return self.s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket_name, 'Key': storage_key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise MediaResolutionError(storage_key, str(e)) from e
