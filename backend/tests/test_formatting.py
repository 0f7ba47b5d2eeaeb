"""Unit tests for contract formatting helpers."""

import pytest
from datetime import date, datetime

from backoffice.services.formatting import (
    DATE_NOT_SPECIFIED,
    INVALID_DATE,
    NOT_SPECIFIED,
    calculate_contract_end_date,
    format_director_name,
    format_ru_date,
    parse_date,
)


class TestFormatDirectorName:
    """Test format_director_name."""

    def test_full_name_with_patronymic(self):
        """Test three-part name becomes two initials and surname."""
        assert format_director_name("Иванов Иван Иванович") == "И.И. Иванов"

    def test_name_without_patronymic(self):
        """Test two-part name keeps a single initial."""
        assert format_director_name("Петров Пётр") == "П. Петров"

    def test_extra_whitespace(self):
        """Test surrounding and repeated whitespace is ignored."""
        assert format_director_name("  Сидоров   Семён  Петрович ") == "С.П. Сидоров"

    def test_lowercase_initials_are_capitalized(self):
        assert format_director_name("смирнова анна") == "А. смирнова"

    def test_latin_name(self):
        assert format_director_name("Smith John") == "J. Smith"

    @pytest.mark.parametrize("value", [None, "", "   ", "Не указан", "не указан", "—", "-"])
    def test_missing_values(self, value):
        """Test empty and placeholder values map to 'Не указан'."""
        assert format_director_name(value) == NOT_SPECIFIED

    def test_single_word_returned_unchanged(self):
        assert format_director_name(" Иванов ") == "Иванов"

    def test_four_words_returned_unchanged(self):
        """Test names with too many parts are not abbreviated."""
        assert format_director_name("Иванов Иван Иванович Оглы") == "Иванов Иван Иванович Оглы"

    def test_non_alphabetic_token_returned_unchanged(self):
        """Test hyphenated or punctuated names are left alone."""
        assert format_director_name("Римский-Корсаков Николай") == "Римский-Корсаков Николай"
        assert format_director_name("Иванов И. И.") == "Иванов И. И."


class TestParseDate:
    """Test parse_date."""

    def test_iso_string(self):
        assert parse_date("2024-03-15") == date(2024, 3, 15)

    def test_iso_timestamp(self):
        assert parse_date("2024-03-15T10:20:30.000Z") == date(2024, 3, 15)

    def test_datetime(self):
        assert parse_date(datetime(2024, 3, 15, 12, 0)) == date(2024, 3, 15)

    def test_date(self):
        assert parse_date(date(2024, 3, 15)) == date(2024, 3, 15)

    def test_garbage(self):
        assert parse_date("not a date") is None
        assert parse_date("2024-13-45") is None
        assert parse_date(12345) is None


class TestContractEndDate:
    """Test calculate_contract_end_date."""

    def test_leap_year_start(self):
        """Test 330 days after 2024-01-01 (a leap year)."""
        assert calculate_contract_end_date("2024-01-01") == "26.11.2024г."

    def test_date_object(self):
        assert calculate_contract_end_date(date(2023, 1, 1)) == "27.11.2023г."

    def test_crosses_year_boundary(self):
        assert calculate_contract_end_date("2024-06-01") == "27.04.2025г."

    def test_missing(self):
        assert calculate_contract_end_date(None) == DATE_NOT_SPECIFIED
        assert calculate_contract_end_date("") == DATE_NOT_SPECIFIED

    def test_unparseable(self):
        """Test a bad date yields a marker instead of raising."""
        assert calculate_contract_end_date("31.12.2024") == INVALID_DATE

    def test_overflow(self):
        assert calculate_contract_end_date(date(9999, 12, 1)) == INVALID_DATE


class TestFormatRuDate:

    def test_zero_padded(self):
        assert format_ru_date(date(2024, 1, 5)) == "05.01.2024"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
