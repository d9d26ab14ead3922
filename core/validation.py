# =============================================================================
# core/validation.py - Request Input Validation
# =============================================================================
# A small chainable validator attached to every request by the pipeline.
# Route handlers declare checks against body or query parameters and then
# read the collected errors:
#
#   validator.check_body("email", "Please enter a valid email").is_email()
#   validator.check_body("username", "Letters only").match_regex(r"^[a-z]+$")
#   if validator.errors():
#       ...
#
# Besides the built-in checks, custom checks can be registered by name when
# the validator is created; they become methods on every field check.
# =============================================================================

from __future__ import annotations

import re
from typing import Any, Callable, Mapping

# (value, *args) -> bool
CustomCheck = Callable[..., bool]

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def match_regex(value: Any, pattern: str | re.Pattern[str]) -> bool:
    """True if ``pattern`` matches anywhere in ``value``."""
    if value is None:
        return False
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    return regex.search(str(value)) is not None


class FieldCheck:
    """Chainable checks for one parameter. Failed checks record an error."""

    def __init__(
        self,
        validator: RequestValidator,
        param: str,
        value: Any,
        message: str | None,
    ):
        self._validator = validator
        self._param = param
        self._value = value
        self._message = message

    def _record(self, passed: bool, default_message: str) -> FieldCheck:
        if not passed:
            self._validator.add_error(self._param, self._message or default_message, self._value)
        return self

    @property
    def _text(self) -> str:
        return "" if self._value is None else str(self._value)

    def not_empty(self) -> FieldCheck:
        return self._record(bool(self._text.strip()), "Invalid value")

    def is_email(self) -> FieldCheck:
        return self._record(bool(_EMAIL_RE.match(self._text)), "Invalid email")

    def is_length(self, min_length: int = 0, max_length: int | None = None) -> FieldCheck:
        size = len(self._text)
        ok = size >= min_length and (max_length is None or size <= max_length)
        return self._record(ok, "Invalid length")

    def is_int(self) -> FieldCheck:
        return self._record(re.fullmatch(r"[+-]?\d+", self._text) is not None, "Invalid integer")

    def __getattr__(self, name: str) -> Callable[..., FieldCheck]:
        check = self._validator.custom_validators.get(name)
        if check is None:
            raise AttributeError(name)

        def run(*args: Any) -> FieldCheck:
            return self._record(bool(check(self._value, *args)), "Invalid value")

        return run


class RequestValidator:
    """
    Collects validation errors for one request.

    Args:
        body: Parsed request body (form or JSON object)
        query: Query string parameters
        custom_validators: Extra checks, exposed as FieldCheck methods
    """

    def __init__(
        self,
        body: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        custom_validators: Mapping[str, CustomCheck] | None = None,
    ):
        self.body = dict(body or {})
        self.query = dict(query or {})
        self.custom_validators = dict(custom_validators or {})
        self._errors: list[dict[str, Any]] = []

    def check_body(self, param: str, message: str | None = None) -> FieldCheck:
        return FieldCheck(self, param, self.body.get(param), message)

    def check_query(self, param: str, message: str | None = None) -> FieldCheck:
        return FieldCheck(self, param, self.query.get(param), message)

    def check(self, param: str, message: str | None = None) -> FieldCheck:
        """Check a parameter from the body, falling back to the query string."""
        value = self.body.get(param, self.query.get(param))
        return FieldCheck(self, param, value, message)

    def add_error(self, param: str, message: str, value: Any) -> None:
        self._errors.append({"param": param, "msg": message, "value": value})

    def errors(self) -> list[dict[str, Any]]:
        return list(self._errors)
