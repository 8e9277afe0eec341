"""Unit tests for field extraction rules."""

import pytest

from profilescraper.core.scraping.extraction import (
    build_contact,
    contact_value,
    filter_services,
    is_service_candidate,
    pair_faqs,
)
from profilescraper.core.scraping.results import NO_ANSWER, NOT_FOUND, ExtractedFAQ


class TestServiceFilter:
    """Test suite for service filtering."""

    def test_filters_staff_and_short_entries(self) -> None:
        """Test that doctor names and short strings are dropped."""
        services = filter_services(["Cleaning", "Dr. Smith", "Ab", "Whitening"])

        assert [service.name for service in services] == ["Cleaning", "Whitening"]

    @pytest.mark.parametrize(
        "text",
        [
            "Meet the Doctor",
            "Our Team",
            "Patient Reviews",
            "testimonials",
            "Latest NEWS",
            "About Us",
            "Implant Specialist",
            "Physician Directory",
            "Oral Surgeon",
            "Contact",
        ],
    )
    def test_denylisted_headings(self, text: str) -> None:
        """Test that navigation and staff headings are rejected in any case."""
        assert not is_service_candidate(text)

    def test_doctor_marker_is_case_sensitive(self) -> None:
        """Test that only a capitalised "Dr" marks a staff entry."""
        assert not is_service_candidate("Dr Jones")
        assert is_service_candidate("Hydrafacial")
        assert is_service_candidate("Laundry drop-off")

    def test_four_characters_is_enough(self) -> None:
        """Test the minimum service name length boundary."""
        assert is_service_candidate("Spa!")
        assert not is_service_candidate("Spa")

    def test_names_are_trimmed(self) -> None:
        """Test that surrounding whitespace is removed before filtering."""
        services = filter_services(["  Veneers\n", "   Ab   "])

        assert [service.name for service in services] == ["Veneers"]

    def test_preserves_page_order(self) -> None:
        """Test that surviving services keep their original order."""
        raw = ["Root Canal", "Braces", "Crowns", "Bridges"]

        assert [service.name for service in filter_services(raw)] == raw

    def test_limit_caps_result(self) -> None:
        """Test that the limit keeps only the first services."""
        raw = [f"Service {i}" for i in range(15)]

        services = filter_services(raw, limit=10)

        assert len(services) == 10
        assert services[-1].name == "Service 9"

    def test_zero_limit_keeps_all(self) -> None:
        """Test that a limit of zero disables capping."""
        raw = [f"Service {i}" for i in range(15)]

        assert len(filter_services(raw, limit=0)) == 15

    def test_empty_input(self) -> None:
        """Test that no matches produce an empty list."""
        assert filter_services([]) == []


class TestContactExtraction:
    """Test suite for contact value selection."""

    def test_first_text_wins(self) -> None:
        """Test that the first matched element's text is used."""
        assert contact_value(["(555) 123-4567", "555-000-0000"], [], "tel:") == "(555) 123-4567"

    def test_falls_back_to_href(self) -> None:
        """Test that an element without text yields its link target."""
        assert contact_value([""], ["tel:+15551234567"], "tel:") == "+15551234567"

    def test_mailto_query_string_dropped(self) -> None:
        """Test that mailto parameters are stripped from the address."""
        value = contact_value([""], ["mailto:hello@example.com?subject=Hi"], "mailto:")

        assert value == "hello@example.com"

    def test_nothing_usable(self) -> None:
        """Test that empty matches yield None."""
        assert contact_value([], [], "tel:") is None
        assert contact_value(["  "], [""], "tel:") is None

    def test_build_contact_uses_sentinels(self) -> None:
        """Test that missing phone and email become "Not found"."""
        contact = build_contact(None, None)

        assert contact.phone == NOT_FOUND
        assert contact.email == NOT_FOUND
        assert contact.phone == "Not found"

    def test_build_contact_keeps_values(self) -> None:
        """Test that found values are kept as-is."""
        contact = build_contact("555-1234567", "hi@example.com")

        assert contact.to_dict() == {"phone": "555-1234567", "email": "hi@example.com"}


class TestFaqPairing:
    """Test suite for FAQ pairing."""

    def test_pairs_by_index(self) -> None:
        """Test that questions and answers pair positionally."""
        faqs = pair_faqs(["Q1?", "Q2?"], ["A1", "A2"])

        assert faqs == [ExtractedFAQ("Q1?", "A1"), ExtractedFAQ("Q2?", "A2")]

    def test_missing_answer_gets_sentinel(self) -> None:
        """Test that three questions and two answers give three pairs."""
        faqs = pair_faqs(["Q1?", "Q2?", "Q3?"], ["A1", "A2"])

        assert len(faqs) == 3
        assert faqs[2].question == "Q3?"
        assert faqs[2].answer == "No answer found"

    def test_empty_answer_gets_sentinel(self) -> None:
        """Test that a blank answer is treated as missing."""
        faqs = pair_faqs(["Q1?"], ["   "])

        assert faqs[0].answer == NO_ANSWER

    def test_surplus_answers_dropped(self) -> None:
        """Test that answers without a question are ignored."""
        faqs = pair_faqs(["Q1?"], ["A1", "A2", "A3"])

        assert faqs == [ExtractedFAQ("Q1?", "A1")]

    def test_limit_caps_pairs(self) -> None:
        """Test that the limit keeps only the first pairs."""
        questions = [f"Q{i}?" for i in range(8)]
        answers = [f"A{i}" for i in range(8)]

        faqs = pair_faqs(questions, answers, limit=5)

        assert [faq.question for faq in faqs] == ["Q0?", "Q1?", "Q2?", "Q3?", "Q4?"]

    def test_no_questions(self) -> None:
        """Test that no questions produce no pairs."""
        assert pair_faqs([], ["Orphan answer"]) == []
