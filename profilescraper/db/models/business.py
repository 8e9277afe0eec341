"""Business model for the businesses whose websites are scraped."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class Business(SQLModel, table=True):
    """Business record keyed by its external business id.

    Name and website URL are owned by the business management layer; a row
    may exist as a bare stub holding only ``business_id``.
    """

    __tablename__ = "businesses"

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
    )
    business_id: str = Field(nullable=False, unique=True, index=True)
    business_name: str | None = Field(default=None)
    website_url: str | None = Field(default=None)

    # Timestamps
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        nullable=False,
    )
