"""Series definition validation

Checks run at create/update time, before anything is written.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Sequence, Union

from src.domain.errors import ValidationError
from src.domain.recurring_invoice import LineItemTemplate, RecurrenceFrequency

TemplateInput = Union[LineItemTemplate, Dict[str, Any]]

MIN_DAY_OF_MONTH = 1
MAX_DAY_OF_MONTH = 31


def parse_frequency(value: Any) -> RecurrenceFrequency:
    try:
        return RecurrenceFrequency(value)
    except ValueError:
        raise ValidationError(
            f"Unknown frequency '{value}'",
            reason="Expected one of: " + ", ".join(f.value for f in RecurrenceFrequency),
        )


def validate_day_of_month(day_of_month: Any) -> int:
    if isinstance(day_of_month, bool) or not isinstance(day_of_month, int):
        raise ValidationError(f"day_of_month must be an integer, got {day_of_month!r}")
    if not MIN_DAY_OF_MONTH <= day_of_month <= MAX_DAY_OF_MONTH:
        raise ValidationError(
            f"day_of_month must be between {MIN_DAY_OF_MONTH} and {MAX_DAY_OF_MONTH}, got {day_of_month}"
        )
    return day_of_month


def _parse_decimal(value: Any, field: str, position: int) -> Decimal:
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"items[{position}].{field} is not a decimal number: {value!r}")
    if not parsed.is_finite():
        raise ValidationError(f"items[{position}].{field} must be finite, got {value!r}")
    return parsed


def validate_items(items: Optional[Sequence[TemplateInput]]) -> List[Dict[str, Any]]:
    """
    Validate line-item templates and normalise them for storage

    Returns:
        Templates as plain dicts, in their original order
    """
    if not items:
        raise ValidationError("A recurring invoice needs at least one item")

    normalised: List[Dict[str, Any]] = []
    for position, raw in enumerate(items):
        data = raw.model_dump() if isinstance(raw, LineItemTemplate) else dict(raw)

        description = (data.get("description") or "").strip()
        if not description:
            raise ValidationError(f"items[{position}].description is required")

        quantity = _parse_decimal(data.get("quantity"), "quantity", position)
        if quantity <= 0:
            raise ValidationError(f"items[{position}].quantity must be greater than 0")

        unit_price = _parse_decimal(data.get("unit_price"), "unit_price", position)
        if unit_price < 0:
            raise ValidationError(f"items[{position}].unit_price cannot be negative")

        tax_rate = _parse_decimal(data.get("tax_rate") or "0", "tax_rate", position)
        if not Decimal("0") <= tax_rate <= Decimal("100"):
            raise ValidationError(f"items[{position}].tax_rate must be between 0 and 100")

        normalised.append(
            LineItemTemplate(
                product_id=data.get("product_id") or None,
                description=description,
                quantity=str(data.get("quantity")).strip(),
                unit_price=str(data.get("unit_price")).strip(),
                tax_rate=str(data.get("tax_rate") or "0").strip(),
            ).model_dump()
        )
    return normalised


def validate_definition(
    *,
    frequency: Any,
    start_date: date,
    end_date: Optional[date],
    day_of_month: Any,
    auto_send: bool,
    recipient_email: Optional[str],
    notification_days_before: int,
    items: Optional[Sequence[TemplateInput]],
    currency: str = "EUR",
) -> List[Dict[str, Any]]:
    """
    Validate a complete series definition

    Returns:
        Normalised item templates

    Raises:
        ValidationError: on the first rule that is violated
    """
    parse_frequency(frequency)
    validate_day_of_month(day_of_month)

    if end_date is not None and end_date < start_date:
        raise ValidationError(
            f"end_date {end_date.isoformat()} is before start_date {start_date.isoformat()}"
        )

    if auto_send and not (recipient_email or "").strip():
        raise ValidationError("recipient_email is required when auto_send is enabled")

    if recipient_email and "@" not in recipient_email:
        raise ValidationError(f"recipient_email '{recipient_email}' is not an email address")

    if notification_days_before is None or notification_days_before < 0:
        raise ValidationError("notification_days_before cannot be negative")

    if not currency or len(currency) != 3 or not currency.isalpha():
        raise ValidationError(f"currency must be a 3-letter ISO 4217 code, got {currency!r}")

    return validate_items(items)
