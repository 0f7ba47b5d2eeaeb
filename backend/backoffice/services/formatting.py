"""
Display helpers for the rendered contract templates.

The rendering workflow receives ready-made strings, so every formatting
rule for names and dates lives here.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

logger = logging.getLogger(__name__)

NOT_SPECIFIED = "Не указан"
DATE_NOT_SPECIFIED = "Не указана"
INVALID_DATE = "Неверная дата"

CONTRACT_TERM_DAYS = 330

DOCUMENT_TYPE_LABELS = {
    "SHIPMENT": "Отгрузка",
    "RENTAL": "Аренда",
}

_PLACEHOLDER_NAMES = {"не указан", "—", "-"}
_NAME_TOKEN = re.compile(r"^[а-яёa-z]+$", re.IGNORECASE)


def format_director_name(full_name: Optional[str]) -> str:
    """
    Abbreviate "Фамилия Имя Отчество" to "И.О. Фамилия".

    Examples:
        "Иванов Иван Иванович" -> "И.И. Иванов"
        "Петров Пётр" -> "П. Петров"
        "" -> "Не указан"

    Anything that is not two or three alphabetic words is returned trimmed
    but otherwise unchanged.
    """
    if not isinstance(full_name, str) or not full_name.strip():
        return NOT_SPECIFIED

    trimmed = full_name.strip()
    if trimmed.lower() in _PLACEHOLDER_NAMES:
        return NOT_SPECIFIED

    parts = trimmed.split()
    if len(parts) not in (2, 3):
        return trimmed
    if not all(_NAME_TOKEN.match(part) for part in parts):
        return trimmed

    last_name, first_name = parts[0], parts[1]
    initials = first_name[0].upper() + "."
    if len(parts) == 3:
        initials += parts[2][0].upper() + "."
    return f"{initials} {last_name}"


def parse_date(value: Union[date, datetime, str]) -> Optional[date]:
    """Calendar date from a date, datetime or ISO string; None if unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            # accepts "2024-01-01" and full ISO timestamps
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def format_ru_date(value: Union[date, datetime]) -> str:
    """Short Russian date, DD.MM.YYYY."""
    return value.strftime("%d.%m.%Y")


def calculate_contract_end_date(start: Union[date, datetime, str, None]) -> str:
    """
    Contract end date: start date plus 330 days, as "DD.MM.YYYYг.".

    Never raises; a missing start yields "Не указана" and an unparseable
    one "Неверная дата", so a bad date cannot fail document creation.
    """
    if start is None or (isinstance(start, str) and not start.strip()):
        return DATE_NOT_SPECIFIED

    start_date = parse_date(start)
    if start_date is None:
        logger.warning(f"Cannot compute contract end date from {start!r}")
        return INVALID_DATE

    try:
        end_date = start_date + timedelta(days=CONTRACT_TERM_DAYS)
    except OverflowError:
        return INVALID_DATE

    return f"{format_ru_date(end_date)}г."
