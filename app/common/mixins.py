"""
Mixins comunes para los modelos
"""
from sqlalchemy import Column, DateTime, Boolean
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from datetime import datetime
from uuid import uuid4


class TimestampMixin:
    """Mixin for models that need timestamp tracking"""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class SoftDeleteMixin:
    """Mixin for soft delete functionality (is_active + deleted_at)"""

    is_active = Column(Boolean, default=True, nullable=False, index=True)

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def soft_delete(self):
        self.deleted_at = datetime.utcnow()
        self.is_active = False

    def restore(self):
        self.deleted_at = None
        self.is_active = True


class BaseMixin(TimestampMixin, SoftDeleteMixin):
    """Combina id, timestamps y soft delete para la mayoría de entidades de negocio"""

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4, index=True)
