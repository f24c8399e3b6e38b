# shared/common/mixins.py
"""
Abstract model bases shared by the profile models.
"""

import uuid

from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """UUID primary key. Profiles reuse the caller's user id as their key."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimestampMixin(models.Model):
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
