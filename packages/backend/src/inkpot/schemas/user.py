"""Schemas for signup and signin.

Wire names follow the signup form (firstName, lastName); attributes are
snake_case.
"""

from pydantic import BaseModel, Field, field_validator

from inkpot.schemas import validate

EMAIL_PATTERN = r"^\S+@\S+\.\S+$"


class SignupInput(BaseModel):
    first_name: str = Field(..., alias="firstName", min_length=1, max_length=100)
    last_name: str = Field(..., alias="lastName", min_length=1, max_length=100)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=8)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class SigninInput(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


def validate_signup(data: dict) -> SignupInput:
    return validate(SignupInput, data, "Invalid signup data.")


def validate_signin(data: dict) -> SigninInput:
    return validate(SigninInput, data, "Invalid signin data.")
