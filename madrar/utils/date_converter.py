# madrar/utils/date_converter.py

from datetime import date, datetime
from typing import Optional, Union

from madrar.constants import DATE_FORMAT, Language
from madrar.errors import ValidationError

ARABIC_INDIC_DIGITS = str.maketrans("0123456789", "٠١٢٣٤٥٦٧٨٩")


def now() -> datetime:
    """Current local time without microseconds, the precision every timestamp is stored with."""
    return datetime.now().replace(microsecond=0)


def _invalid_date(value, field_name: str) -> ValidationError:
    return ValidationError(f"{field_name} must be an ISO date (YYYY-MM-DD), got {value!r}.",
                           "validation.invalid_date", field=field_name)


def parse_datetime(value: Union[str, date, datetime, None], field_name: str = "date") -> Optional[datetime]:
    """Parses an ISO string (date or datetime) into a datetime; dates become midnight."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        raise _invalid_date(value, field_name)


def parse_date(value: Union[str, date, datetime, None], field_name: str = "date") -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip().split("T")[0].split(" ")[0])
    except ValueError:
        raise _invalid_date(value, field_name)


def to_display_str(value: Union[date, datetime, None], language: Union[Language, str] = Language.ENGLISH) -> str:
    """A date as shown to the user: YYYY-MM-DD in English, DD/MM/YYYY with Arabic-Indic digits in Arabic."""
    if value is None:
        return "-"
    code = language.value if isinstance(language, Language) else language
    if isinstance(value, datetime):
        value = value.date()
    if code == Language.ARABIC.value:
        return value.strftime("%d/%m/%Y").translate(ARABIC_INDIC_DIGITS)
    return value.strftime(DATE_FORMAT)
