"""Field-level validation rules for credential and profile payloads.

Each check returns a list of :class:`Violation` objects; an empty list means
the payload is acceptable. A field is checked rule by rule and every failing
rule is recorded on the same violation, except that a missing value or a
non-string value short-circuits the remaining rules for that field.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from email_validator import EmailNotValidError, validate_email

from .contracts import LoginInput, ProfileUpdateInput, RegisterInput, as_target, provided

PASSWORD_MIN_LENGTH = 8

_ALPHA = re.compile(r"[A-Za-z]+")
_CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")

Rule = Callable[[str, str], "tuple[str, str] | None"]


@dataclass(slots=True)
class Violation:
    """A single field failing one or more validation rules."""

    target: dict[str, Any]
    value: Any
    property: str
    constraints: dict[str, str]
    children: list["Violation"] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "value": self.value,
            "property": self.property,
            "children": [child.to_dict() for child in self.children],
            "constraints": dict(self.constraints),
        }


def is_alpha(prop: str, value: str) -> tuple[str, str] | None:
    if _ALPHA.fullmatch(value):
        return None
    return "isAlpha", f"{prop} must contain only letters (a-zA-Z)"


def min_length(limit: int) -> Rule:
    def check(prop: str, value: str) -> tuple[str, str] | None:
        if len(value) >= limit:
            return None
        return "minLength", f"{prop} must be longer than or equal to {limit} characters"

    return check


def is_email(prop: str, value: str) -> tuple[str, str] | None:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return "isEmail", f"{prop} must be an email"
    return None


def is_not_blank(prop: str, value: str) -> tuple[str, str] | None:
    if value.strip():
        return None
    return "isNotEmpty", f"{prop} should not be empty"


def no_control_characters(prop: str, value: str) -> tuple[str, str] | None:
    if _CONTROL_CHARACTERS.search(value) is None:
        return None
    return "noControlCharacters", f"{prop} must not contain control characters"


USERNAME_RULES: tuple[Rule, ...] = (is_alpha,)
NAME_RULES: tuple[Rule, ...] = (is_not_blank, no_control_characters)
EMAIL_RULES: tuple[Rule, ...] = (no_control_characters, is_email)
PASSWORD_RULES: tuple[Rule, ...] = (min_length(PASSWORD_MIN_LENGTH),)


def check_field(
    target: dict[str, Any],
    prop: str,
    value: Any,
    rules: Iterable[Rule],
    *,
    required: bool = True,
) -> Violation | None:
    """Run ``rules`` against one field and return its violation, if any."""
    value = provided(value)
    if value is None:
        if not required:
            return None
        return Violation(
            target=target,
            value=value,
            property=prop,
            constraints={"isNotEmpty": f"{prop} should not be empty"},
        )
    if not isinstance(value, str):
        return Violation(
            target=target,
            value=value,
            property=prop,
            constraints={"isString": f"{prop} must be a string"},
        )

    constraints: dict[str, str] = {}
    for rule in rules:
        failure = rule(prop, value)
        if failure is not None:
            name, message = failure
            constraints[name] = message
    if not constraints:
        return None
    return Violation(target=target, value=value, property=prop, constraints=constraints)


def _collect(
    target: dict[str, Any],
    checks: Iterable[tuple[str, Any, tuple[Rule, ...]]],
    *,
    required: bool = True,
) -> list[Violation]:
    violations: list[Violation] = []
    for prop, value, rules in checks:
        violation = check_field(target, prop, value, rules, required=required)
        if violation is not None:
            violations.append(violation)
    return violations


def validate_login(payload: LoginInput) -> list[Violation]:
    """Check a login payload: alphabetic username and a long enough password."""
    return _collect(
        as_target(payload),
        (
            ("username", payload.username, USERNAME_RULES),
            ("password", payload.password, PASSWORD_RULES),
        ),
    )


def validate_registration(payload: RegisterInput) -> list[Violation]:
    """Check a registration payload; all four fields are required."""
    return _collect(
        as_target(payload),
        (
            ("username", payload.username, USERNAME_RULES),
            ("name", payload.name, NAME_RULES),
            ("email", payload.email, EMAIL_RULES),
            ("password", payload.password, PASSWORD_RULES),
        ),
    )


def validate_profile_update(payload: ProfileUpdateInput) -> list[Violation]:
    """Check only the fields present on a profile update."""
    return _collect(
        as_target(payload),
        (
            ("name", payload.name, NAME_RULES),
            ("email", payload.email, EMAIL_RULES),
            ("password", payload.password, PASSWORD_RULES),
        ),
        required=False,
    )
