"""
Form models for the authentication screen using Pydantic.
"""
from pydantic import BaseModel, Field, ValidationError, model_validator

MIN_PASSWORD_LENGTH = 8


class LoginForm(BaseModel):
    """Sign-in form."""
    username: str = Field(min_length=1, description="Account username")
    password: str = Field(min_length=1, description="Account password")


class SignupForm(BaseModel):
    """
    Sign-up form.

    The only screen with explicit validation: checks run in the order the
    user reads the form and the first failure is reported.
    """
    username: str = Field(min_length=1, description="Account username")
    email: str = Field(default="", description="Contact email")
    password: str = Field(description="Chosen password")
    confirm_password: str = Field(default="", description="Password confirmation")
    agree_to_terms: bool = Field(default=False, description="Terms & conditions accepted")

    @model_validator(mode="after")
    def check_signup_rules(self) -> "SignupForm":
        if len(self.password) < MIN_PASSWORD_LENGTH:
            raise ValueError("Password must be over 8 characters")
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        if not self.agree_to_terms:
            raise ValueError("Please agree to terms & conditions")
        return self


def first_error_message(exc: ValidationError) -> str:
    """The message of the first validation failure, as shown to the user."""
    error = exc.errors()[0]
    original = (error.get("ctx") or {}).get("error")
    if original is not None:
        return str(original)
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field.replace('_', ' ').capitalize()}: {error['msg']}" if field else error["msg"]
