"""
Snippetbox — Form Validation Helpers
======================================

What:  A small reusable validator that collects field-level and form-level
       error messages, plus the check functions forms are built from.
How:   Forms inherit Validator, run their checks with check_field(), and
       handlers re-render the page when `valid` is False. Templates read
       `form.field_errors[...]` and `form.non_field_errors` directly.
"""

import re
from typing import Dict, Iterable, List, Pattern

from pydantic import BaseModel, Field

# W3C HTML5 email pattern
EMAIL_RX: Pattern[str] = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


class Validator(BaseModel):
    """
    Error accumulator shared by every form.

    Attributes:
        field_errors:     One message per form field (first one wins)
        non_field_errors: Messages not tied to a single field
    """

    field_errors: Dict[str, str] = Field(default_factory=dict)
    non_field_errors: List[str] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.field_errors and not self.non_field_errors

    def add_field_error(self, key: str, message: str) -> None:
        self.field_errors.setdefault(key, message)

    def add_non_field_error(self, message: str) -> None:
        self.non_field_errors.append(message)

    def check_field(self, ok: bool, key: str, message: str) -> None:
        if not ok:
            self.add_field_error(key, message)


# ── Checks ────────────────────────────────────────────────────────────────

def not_blank(value: str) -> bool:
    return value.strip() != ""


def max_chars(value: str, n: int) -> bool:
    # len() counts code points, so multi-byte characters count once
    return len(value) <= n


def min_chars(value: str, n: int) -> bool:
    return len(value) >= n


def permitted_value(value, permitted: Iterable) -> bool:
    return value in permitted


def matches(value: str, rx: Pattern[str]) -> bool:
    return rx.match(value) is not None
