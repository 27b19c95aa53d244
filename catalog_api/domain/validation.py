"""Declarative field rules and the validator that checks entities against them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from email_validator import EmailNotValidError, validate_email


@dataclass(frozen=True)
class Violation:
    field: str
    message: str


@dataclass(frozen=True)
class Rule:
    """Constraints for a single field. Unset bounds are not checked."""

    field: str
    kind: type = str
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    length: int | None = None
    minimum: int | None = None
    maximum: int | None = None
    email: bool = False
    item_kind: type | None = None


PRODUCT_RULES: tuple[Rule, ...] = (
    Rule("product_name", str, required=True, min_length=1, max_length=10),
    Rule("price", int, required=True, minimum=0, maximum=2000),
    Rule("currency", str, required=True, length=3),
    Rule("discount", int),
    Rule("vendor", str, required=True, min_length=1),
    Rule("accessories", list, item_kind=str),
    Rule("is_essential", bool),
)

CREDENTIAL_RULES: tuple[Rule, ...] = (
    Rule("username", str, required=True, email=True),
    Rule("password", str, required=True, min_length=8, max_length=300),
)


def _is_kind(value: Any, kind: type) -> bool:
    # bool is an int subclass; never accept it where a number is expected
    if kind is int and isinstance(value, bool):
        return False
    return isinstance(value, kind)


def _check(rule: Rule, value: Any) -> str | None:
    if not _is_kind(value, rule.kind):
        return f"must be of type {rule.kind.__name__}"
    if rule.item_kind is not None and not all(_is_kind(item, rule.item_kind) for item in value):
        return f"items must be of type {rule.item_kind.__name__}"
    if rule.kind in (str, list):
        size = len(value)
        if rule.length is not None and size != rule.length:
            return f"must be exactly {rule.length} characters"
        if rule.min_length is not None and size < rule.min_length:
            return f"must be at least {rule.min_length} characters"
        if rule.max_length is not None and size > rule.max_length:
            return f"must be at most {rule.max_length} characters"
    if rule.kind is int:
        if rule.minimum is not None and value < rule.minimum:
            return f"must be >= {rule.minimum}"
        if rule.maximum is not None and value > rule.maximum:
            return f"must be <= {rule.maximum}"
    if rule.email:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            return "must be a valid email address"
    return None


def validate(data: Mapping[str, Any], rules: Sequence[Rule]) -> list[Violation]:
    """Return every field-level violation; an empty list means the entity is valid."""
    violations: list[Violation] = []
    for rule in rules:
        value = data.get(rule.field)
        if value is None:
            if rule.required:
                violations.append(Violation(rule.field, "is required"))
            continue
        problem = _check(rule, value)
        if problem:
            violations.append(Violation(rule.field, problem))
    return violations


def validate_product(data: Mapping[str, Any]) -> list[Violation]:
    return validate(data, PRODUCT_RULES)


def validate_credentials(data: Mapping[str, Any]) -> list[Violation]:
    return validate(data, CREDENTIAL_RULES)
