"""
Snippetbox — HTML Form Models
===============================

What:  One pydantic model per HTML form, holding the submitted values plus
       the Validator error state.
How:   Handlers build a form from the posted fields, call validate_fields(),
       and either act on it or re-render the page with the same form object
       so the template can show the errors next to the entered values.
       Password values are kept on the model for processing only; templates
       never write them back into the page.
"""

from snippetbox.validator import (
    EMAIL_RX,
    Validator,
    matches,
    max_chars,
    min_chars,
    not_blank,
    permitted_value,
)

BLANK = "This field cannot be blank"
EXPIRY_DAYS = (1, 7, 365)
PASSWORD_MIN_LENGTH = 8
TITLE_MAX_LENGTH = 100


class SnippetCreateForm(Validator):
    title: str = ""
    content: str = ""
    expires: int = 365

    def validate_fields(self) -> bool:
        self.check_field(not_blank(self.title), "title", BLANK)
        self.check_field(
            max_chars(self.title, TITLE_MAX_LENGTH),
            "title",
            f"This field cannot be more than {TITLE_MAX_LENGTH} characters long",
        )
        self.check_field(not_blank(self.content), "content", BLANK)
        self.check_field(
            permitted_value(self.expires, EXPIRY_DAYS),
            "expires",
            "This field must equal 1, 7 or 365",
        )
        return self.valid


class UserSignupForm(Validator):
    name: str = ""
    email: str = ""
    password: str = ""

    def validate_fields(self) -> bool:
        self.check_field(not_blank(self.name), "name", BLANK)
        self.check_field(not_blank(self.email), "email", BLANK)
        self.check_field(matches(self.email, EMAIL_RX), "email", "This field must be a valid email address")
        self.check_field(not_blank(self.password), "password", BLANK)
        self.check_field(
            min_chars(self.password, PASSWORD_MIN_LENGTH),
            "password",
            f"This field must be at least {PASSWORD_MIN_LENGTH} characters long",
        )
        return self.valid


class UserLoginForm(Validator):
    email: str = ""
    password: str = ""

    def validate_fields(self) -> bool:
        self.check_field(not_blank(self.email), "email", BLANK)
        self.check_field(matches(self.email, EMAIL_RX), "email", "This field must be a valid email address")
        self.check_field(not_blank(self.password), "password", BLANK)
        return self.valid


class AccountPasswordUpdateForm(Validator):
    current_password: str = ""
    new_password: str = ""
    new_password_confirmation: str = ""

    def validate_fields(self) -> bool:
        self.check_field(not_blank(self.current_password), "current_password", BLANK)
        self.check_field(not_blank(self.new_password), "new_password", BLANK)
        self.check_field(
            min_chars(self.new_password, PASSWORD_MIN_LENGTH),
            "new_password",
            f"This field must be at least {PASSWORD_MIN_LENGTH} characters long",
        )
        self.check_field(
            not_blank(self.new_password_confirmation), "new_password_confirmation", BLANK
        )
        self.check_field(
            self.new_password == self.new_password_confirmation,
            "new_password_confirmation",
            "Passwords do not match",
        )
        return self.valid
