# date_logic.py
# ======================
# Date parts validation + precise age between two calendar dates
# Used by main.py; pure functions, no I/O

import calendar
import re
from dataclasses import dataclass, asdict
from datetime import date
from typing import Dict, Optional, Tuple

BIRTH = "birth"
TARGET = "target"

MISSING_FIELD = "missing_field"
INVALID_DATE = "invalid_date"
ORDER_VIOLATION = "order_violation"

MESSAGES = {
    (MISSING_FIELD, BIRTH): "Por favor, preencha todos os campos da data de nascimento.",
    (MISSING_FIELD, TARGET): "Por favor, preencha todos os campos da data de cálculo.",
    (INVALID_DATE, BIRTH): "A data de nascimento informada é inválida (ex: 31/02).",
    (INVALID_DATE, TARGET): "A data de cálculo informada é inválida.",
    (ORDER_VIOLATION, None): "A data de cálculo não pode ser anterior à data de nascimento.",
}

# longer digit runs can never pass the coarse range checks
_INT_RE = re.compile(r"^[+-]?[0-9]{1,9}$")
_DATE_STRING_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{1,4})$")


@dataclass(frozen=True)
class DateParts:
    """Raw day/month/year text exactly as typed into the form."""
    day: str = ""
    month: str = ""
    year: str = ""

    @classmethod
    def from_mapping(cls, data: Optional[Dict]) -> "DateParts":
        if not isinstance(data, dict):
            data = {}
        return cls(
            day=_as_text(data.get("day")),
            month=_as_text(data.get("month")),
            year=_as_text(data.get("year")),
        )

    def is_complete(self) -> bool:
        return all(v.strip() for v in (self.day, self.month, self.year))

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class AgeResult:
    years: int
    months: int
    days: int
    target_date_formatted: str
    is_future: bool

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class ValidationError:
    kind: str
    field: Optional[str]
    message: str

    @classmethod
    def of(cls, kind: str, field: Optional[str] = None) -> "ValidationError":
        return cls(kind=kind, field=field, message=MESSAGES[(kind, field)])

    def to_dict(self) -> Dict:
        return asdict(self)


def _as_text(value) -> str:
    if value is None:
        return ""
    return str(value)


# ---------------------
# Parsing / validation
# ---------------------
def parse_field(text: Optional[str]) -> Optional[int]:
    """Returns the integer value of a single field, or None when empty, non-numeric or absurdly long."""
    if text is None:
        return None
    text = str(text).strip()
    if not text or not _INT_RE.match(text):
        return None
    return int(text)


def validate(parts: DateParts, field: Optional[str] = None) -> Tuple[Optional[date], Optional[ValidationError]]:
    """
    Checks a DateParts triple and returns (date, None) or (None, error).

    Empty fields are reported as missing; anything else that fails (non-numeric
    text, coarse range, day past the end of the month) is an invalid date.
    Never raises.
    """
    invalid = ValidationError(INVALID_DATE, field, MESSAGES.get((INVALID_DATE, field), "Data inválida."))
    if not parts.is_complete():
        return None, ValidationError(MISSING_FIELD, field, MESSAGES.get((MISSING_FIELD, field), "Preencha todos os campos."))

    d = parse_field(parts.day)
    m = parse_field(parts.month)
    y = parse_field(parts.year)
    if d is None or m is None or y is None:
        return None, invalid

    if m < 1 or m > 12:
        return None, invalid
    if d < 1 or d > 31:
        return None, invalid
    if y < 1 or y > 9999:
        return None, invalid

    # date() refuses 31/04 or 29/02 of a common year instead of rolling over
    try:
        return date(y, m, d), None
    except ValueError:
        return None, invalid


def is_valid_date(parts: DateParts) -> bool:
    value, _ = validate(parts)
    return value is not None


def parts_to_date(parts: DateParts) -> date:
    """Converts already validated parts; raises ValueError otherwise."""
    value, error = validate(parts)
    if value is None:
        raise ValueError(error.message)
    return value


def check_request(birth_parts: DateParts, target_parts: DateParts) -> Tuple[Optional[date], Optional[date], Optional[ValidationError]]:
    """Runs the form checks in order: completeness, validity, then birth <= target."""
    if not birth_parts.is_complete():
        return None, None, ValidationError.of(MISSING_FIELD, BIRTH)
    if not target_parts.is_complete():
        return None, None, ValidationError.of(MISSING_FIELD, TARGET)

    birth, error = validate(birth_parts, BIRTH)
    if error:
        return None, None, error
    target, error = validate(target_parts, TARGET)
    if error:
        return None, None, error

    if target < birth:
        return None, None, ValidationError.of(ORDER_VIOLATION)
    return birth, target, None


# ---------------------
# Formatting
# ---------------------
def format_date_string(value: date) -> str:
    return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"


def parse_date_string(text: str) -> Optional[date]:
    """Parses DD/MM/YYYY back into a date; None when the string is not a real date."""
    match = _DATE_STRING_RE.match((text or "").strip())
    if not match:
        return None
    day, month, year = match.groups()
    value, _ = validate(DateParts(day=day, month=month, year=year))
    return value


def today_parts(today: Optional[date] = None) -> DateParts:
    today = today or date.today()
    return DateParts(day=str(today.day), month=str(today.month), year=str(today.year))


# ---------------------
# Age
# ---------------------
def days_in_previous_month(value: date) -> int:
    """Length of the month before value's month, rolling back a year in January."""
    if value.month == 1:
        return 31
    return calendar.monthrange(value.year, value.month - 1)[1]


def compute_age(birth: date, target: date) -> AgeResult:
    years = target.year - birth.year
    months = target.month - birth.month
    days = target.day - birth.day

    # days first: borrowing a month may push months below zero
    if days < 0:
        months -= 1
        borrowed = days_in_previous_month(target)
        # a birth day past the end of the borrowed month counts from its last day
        days = borrowed - min(birth.day, borrowed) + target.day

    if months < 0:
        years -= 1
        months += 12

    return AgeResult(
        years=years,
        months=months,
        days=days,
        target_date_formatted=format_date_string(target),
        is_future=target >= birth,
    )


def _plural(n: int, one: str, many: str) -> str:
    return f"{n} {one if n == 1 else many}"


def describe_age(result: AgeResult) -> str:
    """Human readable pt-BR summary, e.g. '34 anos, 1 mês e 2 dias'."""
    parts = []
    if result.years > 0:
        parts.append(_plural(result.years, "ano", "anos"))
    if result.months > 0:
        parts.append(_plural(result.months, "mês", "meses"))
    if result.days > 0:
        parts.append(_plural(result.days, "dia", "dias"))
    if not parts:
        return "0 dias"
    if len(parts) == 1:
        return parts[0]
    return ", ".join(parts[:-1]) + " e " + parts[-1]
