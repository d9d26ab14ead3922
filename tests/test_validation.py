# =============================================================================
# tests/test_validation.py - Request Validator Tests
# =============================================================================

import re

import pytest

from core.validation import RequestValidator, match_regex


class TestMatchRegex:
    @pytest.mark.parametrize("value,pattern,expected", [
        ("quincy", r"^[a-z]+$", True),
        ("Quincy!", r"^[a-z]+$", False),
        ("abc123", r"\d", True),
        (None, r".*", False),
        (42, r"^\d+$", True),
    ])
    def test_match_regex(self, value, pattern, expected):
        assert match_regex(value, pattern) is expected

    def test_accepts_compiled_pattern(self):
        assert match_regex("ABC", re.compile("abc", re.IGNORECASE))


class TestRequestValidator:
    """Tests for chained checks and error collection."""

    def test_passing_checks_record_nothing(self):
        validator = RequestValidator(body={"email": "camper@example.com", "age": "21"})

        validator.check_body("email").not_empty().is_email()
        validator.check_body("age").is_int()

        assert validator.errors() == []

    def test_failed_check_records_param_message_value(self):
        validator = RequestValidator(body={"email": "not-an-email"})

        validator.check_body("email", "Please enter a valid email").is_email()

        assert validator.errors() == [
            {"param": "email", "msg": "Please enter a valid email", "value": "not-an-email"}
        ]

    def test_default_messages(self):
        validator = RequestValidator(body={"name": ""})

        validator.check_body("name").not_empty()

        assert validator.errors()[0]["msg"] == "Invalid value"

    def test_length_bounds(self):
        validator = RequestValidator(body={"bio": "x" * 10})

        validator.check_body("bio").is_length(1, 5)
        validator.check_body("bio").is_length(5)

        assert len(validator.errors()) == 1

    def test_custom_validator_becomes_method(self):
        """Registered custom checks are callable on every field check."""
        validator = RequestValidator(
            body={"username": "Quincy!"},
            custom_validators={"match_regex": match_regex},
        )

        validator.check_body("username", "Letters only").match_regex(r"^[a-z]+$")

        assert validator.errors()[0]["msg"] == "Letters only"

    def test_unknown_check_raises_attribute_error(self):
        validator = RequestValidator()

        with pytest.raises(AttributeError):
            validator.check_body("x").is_uuid()

    def test_check_falls_back_to_query(self):
        validator = RequestValidator(body={}, query={"page": "two"})

        validator.check("page").is_int()
        validator.check_query("page").is_int()

        assert [e["value"] for e in validator.errors()] == ["two", "two"]
