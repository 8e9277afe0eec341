"""Scraped profile models: services, contact details and FAQs.

Each table holds exactly one row per business. A scrape replaces that row's
content wholesale.
"""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class ServiceCatalog(SQLModel, table=True):
    """Service list for a business, stored as ``[{"name": ...}]``."""

    __tablename__ = "service_catalogs"

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
    )
    business_id: str = Field(nullable=False, unique=True, index=True)
    services: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        nullable=False,
    )


class Contact(SQLModel, table=True):
    """Contact record for a business."""

    __tablename__ = "contacts"

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
    )
    business_id: str = Field(nullable=False, unique=True, index=True)
    phone: str = Field(nullable=False)
    email: str = Field(nullable=False)
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        nullable=False,
    )


class FaqCollection(SQLModel, table=True):
    """FAQ list for a business, stored as ``[{"question": ..., "answer": ...}]``."""

    __tablename__ = "faq_collections"

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
    )
    business_id: str = Field(nullable=False, unique=True, index=True)
    faqs: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        nullable=False,
    )
