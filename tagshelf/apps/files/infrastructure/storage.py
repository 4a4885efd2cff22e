"""Custom storage backend for S3-compatible storage."""

import logging
from typing import final, override

from storages.backends.s3 import S3Storage

logger = logging.getLogger(__name__)


@final
class FileStorage(S3Storage):
    """Custom S3 storage backend for user files.

    Extends django-storages S3Storage with:
    - Presigned upload URLs so clients upload directly to the bucket
    - Enhanced error logging around object deletion
    """

    @override
    def delete(self, name: str) -> None:
        """Delete file from S3 with error handling and logging.

        Args:
            name: Storage path of file to delete.

        Raises:
            Exception: If S3 delete fails.
        """
        try:
            logger.info('Deleting file from storage: %s', name)
            super().delete(name)
            logger.info('Successfully deleted file: %s', name)
        except Exception:
            logger.exception('Failed to delete file from storage: %s', name)
            raise

    def issue_upload_url(
        self,
        name: str,
        content_type: str,
        expires_in: int,
    ) -> str:
        """Create a presigned PUT URL for a direct client upload.

        Args:
            name: Object key the client will upload to.
            content_type: Content type the upload must be sent with.
            expires_in: URL lifetime in seconds.

        Returns:
            Presigned URL.

        Raises:
            Exception: If the URL cannot be signed.
        """
        try:
            upload_url = self.bucket.meta.client.generate_presigned_url(
                'put_object',
                Params={
                    'Bucket': self.bucket_name,
                    'Key': name,
                    'ContentType': content_type,
                },
                ExpiresIn=expires_in,
            )
        except Exception:
            logger.exception('Failed to issue upload URL: %s', name)
            raise
        logger.info(
            'Issued upload URL for %s (expires in %ds)',
            name,
            expires_in,
        )
        return upload_url
