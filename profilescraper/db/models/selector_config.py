"""Selector configuration model mapping profile fields to page selectors."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class SelectorConfig(SQLModel, table=True):
    """Per-business selectors used to extract profile fields.

    Selector strings are opaque CSS queries handed to the browser as-is.
    Only ``service_selector`` is mandatory; the contact pair and FAQ pair
    are each optional.
    """

    __tablename__ = "selector_configs"

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
    )
    business_id: str = Field(nullable=False, unique=True, index=True)
    service_selector: str = Field(nullable=False)
    about_selector: str | None = Field(default=None)

    # contactSelector.{phone,email}
    phone_selector: str | None = Field(default=None)
    email_selector: str | None = Field(default=None)

    # faqsSelector.{question,answer}
    faq_question_selector: str | None = Field(default=None)
    faq_answer_selector: str | None = Field(default=None)

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        nullable=False,
    )

    @property
    def has_faq_selectors(self) -> bool:
        """True when both halves of the FAQ selector pair are configured."""
        return bool(self.faq_question_selector and self.faq_answer_selector)
