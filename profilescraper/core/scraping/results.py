"""Result types produced by one scrape run."""

from dataclasses import dataclass, field

NOT_FOUND = "Not found"
NO_ANSWER = "No answer found"


@dataclass(frozen=True)
class ExtractedService:
    """A service offered by the business."""

    name: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name}


@dataclass(frozen=True)
class ExtractedContact:
    """Contact details, with sentinels in place of missing values."""

    phone: str = NOT_FOUND
    email: str = NOT_FOUND

    def to_dict(self) -> dict[str, str]:
        return {"phone": self.phone, "email": self.email}


@dataclass(frozen=True)
class ExtractedFAQ:
    """A question/answer pair from the FAQ page."""

    question: str
    answer: str = NO_ANSWER

    def to_dict(self) -> dict[str, str]:
        return {"question": self.question, "answer": self.answer}


@dataclass(frozen=True)
class ScrapeResult:
    """Everything extracted for a business in one run."""

    services: list[ExtractedService] = field(default_factory=list)
    contact: ExtractedContact = field(default_factory=ExtractedContact)
    faqs: list[ExtractedFAQ] = field(default_factory=list)

    @property
    def service_names(self) -> list[str]:
        return [service.name for service in self.services]
