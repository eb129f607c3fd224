"""
Cloudflare R2 / S3-compatible storage client.

Uses boto3 with S3-compatible API to interact with Cloudflare R2.
This is storage-provider agnostic - works with any S3-compatible storage.

The browser uploads files directly to R2 with a presigned PUT URL; the
backend never receives file bytes. This client only signs URLs, reads
object metadata, and deletes objects.
"""
import logging
from dataclasses import dataclass
from typing import Iterator, Optional
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from app.config import StorageConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectMetadata:
    """Subset of HEAD object metadata used to verify uploads."""
    key: str
    size: Optional[int]
    content_type: Optional[str]


class R2Client:
    """
    S3-compatible client for Cloudflare R2.

    Configuration is passed in explicitly. A client built from an
    incomplete configuration is created in an unconfigured state and
    refuses every operation.
    """

    def __init__(self, config: StorageConfig, client=None):
        """
        Initialize R2 client with boto3.

        Args:
            config: Storage endpoint, bucket and credentials
            client: Pre-built boto3 S3 client (tests inject a stub here)
        """
        self.config = config
        self._client = client
        self._configured = client is not None

        if self._client is not None:
            return

        if not config.is_complete:
            logger.warning(
                "R2 storage not configured. "
                "Set R2_ENDPOINT (or R2_ACCOUNT_ID), R2_ACCESS_KEY, R2_SECRET_KEY and R2_BUCKET."
            )
            return

        try:
            # signature_version='s3v4' and path-style addressing for R2
            self._client = boto3.client(
                's3',
                endpoint_url=config.endpoint,
                aws_access_key_id=config.access_key,
                aws_secret_access_key=config.secret_key,
                region_name=config.region,
                config=Config(
                    signature_version='s3v4',
                    s3={'addressing_style': 'path'}
                )
            )
            self._configured = True
            logger.info(f"R2 client initialized for bucket: {config.bucket}")

        except NoCredentialsError:
            logger.error("R2 credentials not found or invalid")
        except (BotoCoreError, ValueError) as e:
            logger.error(f"Failed to initialize R2 client: {e}")

    @property
    def is_configured(self) -> bool:
        """Check if R2 client is properly configured."""
        return self._configured and self._client is not None

    @property
    def bucket(self) -> str:
        """Get configured bucket name."""
        return self.config.bucket

    def generate_presigned_upload_url(
        self,
        object_key: str,
        content_type: str,
        expiration: Optional[int] = None
    ) -> Optional[str]:
        """
        Generate a presigned PUT URL for direct upload.

        Args:
            object_key: The S3 object key (path in bucket)
            content_type: MIME type of the file (e.g., image/jpeg)
            expiration: URL expiration in seconds (default from config, 1 hour)

        Returns:
            Presigned URL string, or None if generation fails

        Security:
            - URL expires after specified time (enforced by R2)
            - Only allows PUT (upload), not GET
            - Content-Type must match what was signed
        """
        if not self.is_configured:
            logger.error("Cannot generate presigned URL: R2 not configured")
            return None

        if expiration is None:
            expiration = self.config.presign_expiration

        try:
            url = self._client.generate_presigned_url(
                ClientMethod='put_object',
                Params={
                    'Bucket': self.bucket,
                    'Key': object_key,
                    'ContentType': content_type,
                },
                ExpiresIn=expiration
            )

            logger.debug(f"Generated presigned URL for {object_key}")
            return url

        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to generate presigned URL for {object_key}: {e}")
            return None

    def get_public_url(self, object_key: str) -> str:
        """
        Public URL for an object.

        Uses the bucket's public domain when one is configured. The fallback
        points at the S3 endpoint and only resolves if the bucket is public.
        """
        if self.config.public_url:
            return f"{self.config.public_url.rstrip('/')}/{object_key}"
        endpoint = (self.config.endpoint or "").rstrip('/')
        return f"{endpoint}/{self.bucket}/{object_key}"

    def head_object(self, object_key: str) -> Optional[ObjectMetadata]:
        """
        Read object metadata.

        Returns:
            ObjectMetadata, or None if the object does not exist

        Raises:
            ClientError / BotoCoreError for failures other than "not found"
            RuntimeError if R2 is not configured
        """
        if not self.is_configured:
            raise RuntimeError("R2 not configured")

        try:
            response = self._client.head_object(Bucket=self.bucket, Key=object_key)
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in ('404', 'NoSuchKey', 'NotFound'):
                return None
            raise

        return ObjectMetadata(
            key=object_key,
            size=response.get('ContentLength'),
            content_type=response.get('ContentType'),
        )

    def delete_object(self, object_key: str) -> bool:
        """
        Delete an object from the bucket.

        Args:
            object_key: The S3 object key to delete

        Returns:
            True if deletion was successful, False otherwise
        """
        if not self.is_configured:
            logger.warning(f"Cannot delete object {object_key}: R2 not configured")
            return False

        try:
            self._client.delete_object(Bucket=self.bucket, Key=object_key)
            logger.debug(f"Deleted object {object_key} from R2")
            return True
        except ClientError as e:
            # If object doesn't exist, consider it a success (idempotent)
            if e.response.get('Error', {}).get('Code') in ('404', 'NoSuchKey'):
                logger.debug(f"Object {object_key} not found in R2 (already deleted)")
                return True
            logger.error(f"Failed to delete object {object_key} from R2: {e}")
            return False
        except BotoCoreError as e:
            logger.error(f"Unexpected error deleting object {object_key} from R2: {e}")
            return False

    def iter_keys(self, prefix: str = "") -> Iterator[str]:
        """Yield every object key under a prefix, following pagination."""
        if not self.is_configured:
            raise RuntimeError("R2 not configured")

        paginator = self._client.get_paginator('list_objects_v2')
        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
            for obj in page.get('Contents', []):
                yield obj['Key']

    def delete_objects_batch(self, object_keys: list[str]) -> tuple[int, int]:
        """
        Delete multiple objects from the bucket in batch.

        S3 API supports up to 1000 objects per delete call.
        This method handles larger lists by chunking.

        Returns:
            Tuple of (successful_count, failed_count)
        """
        if not self.is_configured:
            logger.warning("Cannot delete objects: R2 not configured")
            return (0, len(object_keys))

        if not object_keys:
            return (0, 0)

        successful = 0
        failed = 0

        # S3 batch delete supports max 1000 objects per call
        BATCH_SIZE = 1000

        for i in range(0, len(object_keys), BATCH_SIZE):
            batch = object_keys[i:i + BATCH_SIZE]

            try:
                response = self._client.delete_objects(
                    Bucket=self.bucket,
                    Delete={
                        'Objects': [{'Key': key} for key in batch],
                        'Quiet': True  # Only return errors, not successes
                    }
                )

                errors = response.get('Errors', [])
                successful += len(batch) - len(errors)
                failed += len(errors)

                for error in errors[:5]:
                    logger.warning(
                        f"Failed to delete {error.get('Key')}: "
                        f"{error.get('Code')} - {error.get('Message')}"
                    )

            except (ClientError, BotoCoreError) as e:
                logger.error(f"Batch delete failed: {e}")
                failed += len(batch)

        logger.info(f"R2 batch delete complete: {successful} deleted, {failed} failed out of {len(object_keys)} total")
        return (successful, failed)


# Singleton instance
_r2_client: Optional[R2Client] = None


def get_r2_client() -> R2Client:
    """
    Get the singleton R2 client instance, built from application settings.

    Also used as a FastAPI dependency; tests override it with a stub.
    """
    global _r2_client
    if _r2_client is None:
        from app.config import settings
        _r2_client = R2Client(settings.storage_config())
    return _r2_client
