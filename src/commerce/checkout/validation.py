"""Checkout form validation.

Every failure is collected before raising, so the customer sees all problems
at once. Error keys follow the order in which the checkout form renders its
fields; the first key is the one the form should focus.
"""

import re
from collections.abc import Iterable, Mapping

from protean.exceptions import ValidationError

from commerce.shared.pricing import quantity_of

FIELD_ORDER = ("name", "phone", "email", "address", "city", "pincode", "items")

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15
# Longest stored form: 15 digits with a leading + and separators between groups
MAX_PHONE_LENGTH = 32

_PHONE_CHARACTERS = re.compile(r"^\+?[\d\s\-().]+$")
_PINCODE = re.compile(r"^[1-9]\d{5}$")


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def phone_digits(phone) -> str:
    return re.sub(r"\D", "", _text(phone))


def is_valid_phone(phone: str) -> bool:
    """Optional leading +, digits with space/hyphen/dot/parenthesis separators."""
    if len(phone) > MAX_PHONE_LENGTH or not _PHONE_CHARACTERS.match(phone):
        return False
    return MIN_PHONE_DIGITS <= len(phone_digits(phone)) <= MAX_PHONE_DIGITS


def is_valid_email(email: str) -> bool:
    if any(ch.isspace() for ch in email) or email.count("@") != 1:
        return False

    local_part, domain_part = email.split("@", 1)
    if not local_part or local_part.startswith(".") or local_part.endswith("."):
        return False
    if not domain_part or domain_part.startswith((".", "-")) or domain_part.endswith((".", "-")):
        return False
    if "." not in domain_part:
        return False
    return ".." not in local_part and ".." not in domain_part


def is_valid_pincode(pincode: str) -> bool:
    return bool(_PINCODE.match(pincode))


def customer_errors(customer: Mapping | None) -> dict[str, list[str]]:
    customer = customer or {}
    errors: dict[str, list[str]] = {}

    if not _text(customer.get("name")):
        errors["name"] = ["Name is required"]

    phone = _text(customer.get("phone"))
    if not phone:
        errors["phone"] = ["Phone number is required"]
    elif not is_valid_phone(phone):
        errors["phone"] = ["Please enter a valid phone number"]

    email = _text(customer.get("email"))
    if email and not is_valid_email(email):
        errors["email"] = ["Please enter a valid email address"]

    if not _text(customer.get("address")):
        errors["address"] = ["Address is required"]
    if not _text(customer.get("city")):
        errors["city"] = ["City is required"]

    pincode = _text(customer.get("pincode"))
    if not pincode:
        errors["pincode"] = ["Pincode is required"]
    elif not is_valid_pincode(pincode):
        errors["pincode"] = ["Please enter a valid pincode"]

    return errors


def item_errors(lines: Iterable) -> list[str]:
    """Problems with the line items being checked out (dicts or line objects)."""
    lines = list(lines)
    if not lines:
        return ["At least one item is required"]

    messages = []
    for line in lines:
        quantity = line.get("quantity") if isinstance(line, Mapping) else getattr(line, "quantity", None)
        if quantity_of(quantity) < 1:
            messages.append("Quantity must be at least 1")
            break
    return messages


def ordered(errors: Mapping[str, list[str]]) -> dict[str, list[str]]:
    """Re-key ``errors`` into form order, keeping unknown keys at the end."""
    result = {key: list(errors[key]) for key in FIELD_ORDER if key in errors}
    result.update({key: list(value) for key, value in errors.items() if key not in result})
    return result


def clean_customer(customer: Mapping) -> dict:
    cleaned = {key: _text(customer.get(key)) for key in ("name", "phone", "address", "city", "pincode")}
    cleaned["email"] = _text(customer.get("email")) or None
    return cleaned


def validate_customer_info(customer: Mapping | None) -> dict:
    """Return the cleaned customer info, or raise with every field error."""
    errors = customer_errors(customer)
    if errors:
        raise ValidationError(ordered(errors))
    return clean_customer(customer)


def validate_checkout(customer: Mapping | None, lines: Iterable, extra: Mapping[str, list[str]] | None = None) -> dict:
    """Validate customer info and line items together, raising once for all of them."""
    errors = customer_errors(customer)
    items = item_errors(lines)
    for key, messages in (extra or {}).items():
        if key == "items":
            items = items + list(messages)
        else:
            errors.setdefault(key, []).extend(messages)
    if items:
        errors["items"] = items
    if errors:
        raise ValidationError(ordered(errors))
    return clean_customer(customer)
