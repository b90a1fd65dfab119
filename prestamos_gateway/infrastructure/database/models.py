"""SQLAlchemy ORM models for the registration audit trail"""

import uuid
from sqlalchemy import Column, DateTime, Integer, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class RegistrationRun(Base):
    """One bulk registration submission and how far it got"""

    __tablename__ = "registration_run"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    request_id = Column(Text, nullable=True)
    admin_email = Column(Text, nullable=False, index=True)
    outcome = Column(Text, nullable=False)  # completed | rejected | aborted
    admin_id = Column(Integer, nullable=True)
    workers_created = Column(Integer, nullable=False, default=0)
    clients_created = Column(Integer, nullable=False, default=0)
    loans_created = Column(Integer, nullable=False, default=0)
    failed_step = Column(Text, nullable=True)
    error_category = Column(Text, nullable=True)
    error_message = Column(Text, nullable=True)
    created_ids = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
