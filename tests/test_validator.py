"""
Snippetbox — Validator and Form Unit Tests
============================================

What:  Tests for the generic Validator, the check helpers and every form's
       validation rules.
"""

import pytest

from snippetbox.schemas.forms import (
    AccountPasswordUpdateForm,
    SnippetCreateForm,
    UserLoginForm,
    UserSignupForm,
)
from snippetbox.validator import (
    EMAIL_RX,
    Validator,
    matches,
    max_chars,
    min_chars,
    not_blank,
    permitted_value,
)


class TestValidator:
    def test_new_validator_is_valid(self):
        assert Validator().valid is True

    def test_field_error_makes_invalid(self):
        v = Validator()
        v.add_field_error("title", "bad")
        assert v.valid is False
        assert v.field_errors == {"title": "bad"}

    def test_first_field_error_wins(self):
        v = Validator()
        v.add_field_error("title", "first")
        v.add_field_error("title", "second")
        assert v.field_errors["title"] == "first"

    def test_non_field_error_makes_invalid(self):
        v = Validator()
        v.add_non_field_error("Email or password is incorrect")
        assert v.valid is False
        assert v.non_field_errors == ["Email or password is incorrect"]

    def test_check_field_only_records_failures(self):
        v = Validator()
        v.check_field(True, "a", "never")
        v.check_field(False, "b", "recorded")
        assert v.field_errors == {"b": "recorded"}

    def test_validators_do_not_share_state(self):
        a, b = Validator(), Validator()
        a.add_field_error("x", "y")
        assert b.valid is True


class TestChecks:
    @pytest.mark.parametrize("value", ["", "   ", "\t\n"])
    def test_not_blank_rejects_whitespace(self, value):
        assert not_blank(value) is False

    def test_not_blank_accepts_text(self):
        assert not_blank(" x ") is True

    def test_max_chars_counts_characters_not_bytes(self):
        # 5 characters, 15 bytes in UTF-8
        assert max_chars("日本語です", 5) is True
        assert max_chars("日本語です!", 5) is False

    def test_min_chars_boundary(self):
        assert min_chars("12345678", 8) is True
        assert min_chars("1234567", 8) is False

    def test_permitted_value(self):
        assert permitted_value(7, (1, 7, 365)) is True
        assert permitted_value(2, (1, 7, 365)) is False

    @pytest.mark.parametrize(
        "email",
        ["alice@example.com", "a.b+tag@sub.example.co.uk", "x@localhost"],
    )
    def test_email_rx_accepts(self, email):
        assert matches(email, EMAIL_RX) is True

    @pytest.mark.parametrize(
        "email",
        ["", "alice", "alice@", "@example.com", "alice@-example.com", "al ice@example.com"],
    )
    def test_email_rx_rejects(self, email):
        assert matches(email, EMAIL_RX) is False


class TestSnippetCreateForm:
    def test_valid(self):
        form = SnippetCreateForm(title="Title", content="Body", expires=7)
        assert form.validate_fields() is True

    def test_blank_fields(self):
        form = SnippetCreateForm(title="", content=" ", expires=365)
        assert form.validate_fields() is False
        assert form.field_errors["title"] == "This field cannot be blank"
        assert form.field_errors["content"] == "This field cannot be blank"

    def test_title_too_long(self):
        form = SnippetCreateForm(title="x" * 101, content="Body", expires=1)
        assert form.validate_fields() is False
        assert form.field_errors["title"] == "This field cannot be more than 100 characters long"

    def test_title_of_exactly_100_characters(self):
        form = SnippetCreateForm(title="x" * 100, content="Body", expires=1)
        assert form.validate_fields() is True

    def test_expires_not_permitted(self):
        form = SnippetCreateForm(title="Title", content="Body", expires=30)
        assert form.validate_fields() is False
        assert form.field_errors["expires"] == "This field must equal 1, 7 or 365"

    def test_defaults_to_one_year(self):
        assert SnippetCreateForm().expires == 365


class TestUserSignupForm:
    def test_valid(self):
        form = UserSignupForm(name="Bob", email="bob@example.com", password="longenough")
        assert form.validate_fields() is True

    def test_invalid_email(self):
        form = UserSignupForm(name="Bob", email="bob", password="longenough")
        assert form.validate_fields() is False
        assert form.field_errors["email"] == "This field must be a valid email address"

    def test_blank_email_reports_blank_first(self):
        form = UserSignupForm(name="Bob", email="", password="longenough")
        form.validate_fields()
        assert form.field_errors["email"] == "This field cannot be blank"

    def test_short_password(self):
        form = UserSignupForm(name="Bob", email="bob@example.com", password="short")
        assert form.validate_fields() is False
        assert form.field_errors["password"] == "This field must be at least 8 characters long"


class TestUserLoginForm:
    def test_valid(self):
        assert UserLoginForm(email="bob@example.com", password="x").validate_fields() is True

    def test_blank(self):
        form = UserLoginForm()
        assert form.validate_fields() is False
        assert set(form.field_errors) == {"email", "password"}


class TestAccountPasswordUpdateForm:
    def test_valid(self):
        form = AccountPasswordUpdateForm(
            current_password="old-password",
            new_password="new-password",
            new_password_confirmation="new-password",
        )
        assert form.validate_fields() is True

    def test_mismatch(self):
        form = AccountPasswordUpdateForm(
            current_password="old-password",
            new_password="new-password",
            new_password_confirmation="other-password",
        )
        assert form.validate_fields() is False
        assert form.field_errors == {"new_password_confirmation": "Passwords do not match"}

    def test_short_new_password(self):
        form = AccountPasswordUpdateForm(
            current_password="old-password",
            new_password="short",
            new_password_confirmation="short",
        )
        assert form.validate_fields() is False
        assert "new_password" in form.field_errors
