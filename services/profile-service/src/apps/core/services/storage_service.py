# services/profile-service/src/apps/core/services/storage_service.py
"""
Storage Service

Saves uploaded files to the configured Django storage (MinIO/S3 in
deployed environments) and removes them again when the record that
referenced them is deleted or its mutation fails.
"""

import os
import uuid
import logging
from contextlib import contextmanager
from typing import Iterable, List, Optional, Sequence

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.files.storage import Storage, default_storage
from django.core.files.uploadedfile import UploadedFile

from common.validators import validate_list_max_length
from apps.core.exceptions import UploadValidationError


logger = logging.getLogger(__name__)


class StorageService:
    """
    Upload storage for avatars, certificates and work history documents.

    Stored files are described as ``{"type", "title", "url"}`` where
    ``url`` is the storage path.
    """

    def __init__(self, storage: Optional[Storage] = None):
        self.storage = storage or default_storage

    # =========================================================================
    # UPLOAD OPERATIONS
    # =========================================================================

    def validate_upload(self, upload: UploadedFile) -> None:
        """Reject files over the size limit or with a disallowed extension."""
        extension = os.path.splitext(upload.name or '')[1].lstrip('.').lower()
        allowed = [ext.strip().lower() for ext in settings.ALLOWED_UPLOAD_EXTENSIONS]
        if extension not in allowed:
            raise UploadValidationError(
                f"File type '.{extension}' is not allowed",
                filename=upload.name
            )

        max_bytes = settings.MAX_UPLOAD_MB * 1024 * 1024
        if upload.size is not None and upload.size > max_bytes:
            raise UploadValidationError(
                f"File exceeds the {settings.MAX_UPLOAD_MB}MB limit",
                filename=upload.name
            )

    def save_upload(
        self,
        upload: UploadedFile,
        prefix: str,
        field_name: str = 'document'
    ) -> dict:
        """
        Save one upload.

        Args:
            upload: The uploaded file
            prefix: Storage folder, e.g. ``work-history/<user_id>``
            field_name: Form field the file arrived in

        Returns:
            Dict with type, title and url of the stored file
        """
        self.validate_upload(upload)
        extension = os.path.splitext(upload.name)[1].lower()
        key = f"{prefix}/{uuid.uuid4().hex}{extension}"
        path = self.storage.save(key, upload)
        logger.info(f"Stored upload {upload.name} at {path}")
        return {
            'type': field_name,
            'title': upload.name,
            'url': path,
        }

    def save_uploads(
        self,
        uploads: Sequence[UploadedFile],
        prefix: str,
        field_name: str = 'documents',
        max_count: Optional[int] = None
    ) -> List[dict]:
        """Save several uploads; on failure the ones already saved are removed."""
        uploads = list(uploads or [])
        if max_count is not None:
            try:
                validate_list_max_length(uploads, max_count, field_name)
            except DjangoValidationError as e:
                raise UploadValidationError(e.messages[0])

        stored: List[dict] = []
        with self.cleanup_on_error(stored):
            for upload in uploads:
                stored.append(self.save_upload(upload, prefix, field_name))
        return stored

    # =========================================================================
    # FILE MANAGEMENT
    # =========================================================================

    def delete_files(self, paths: Iterable) -> int:
        """
        Delete files, continuing past individual failures.

        Args:
            paths: Storage paths, or stored file dicts with a ``url``

        Returns:
            Number of files deleted
        """
        deleted = 0
        for item in paths:
            path = item.get('url') if isinstance(item, dict) else item
            if not path:
                continue
            try:
                self.storage.delete(path)
                deleted += 1
            except Exception as e:
                logger.error(f"Failed to delete stored file {path}: {e}")
        if deleted:
            logger.info(f"Deleted {deleted} stored files")
        return deleted

    @contextmanager
    def cleanup_on_error(self, paths: Iterable):
        """Delete ``paths`` if the wrapped block raises, then re-raise."""
        try:
            yield
        except Exception:
            self.delete_files(list(paths))
            raise
