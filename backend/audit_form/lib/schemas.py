from typing import Any, List, Literal, Optional, Union

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic_core import PydanticCustomError

SUCCESS_MESSAGE = "Form submitted successfully! You will receive the audit report within 1-7 days."
VALIDATION_MESSAGE = "Validation error"
FAILURE_MESSAGE = "Failed to submit form. Please try again later."

_url_adapter = TypeAdapter(AnyUrl)


def _length(value: str) -> int:
    # UTF-16 code units, as browsers count them
    return len(value.encode("utf-16-le", "surrogatepass")) // 2


def _min_length(value: str, limit: int, message: str) -> str:
    if _length(value) < limit:
        raise PydanticCustomError("too_short", message)
    return value


class AuditRequest(BaseModel):
    """One audit request as posted by the form.

    Field order is the order errors are reported in. Values are kept exactly
    as submitted; nothing is trimmed.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str
    email: str
    phone: str
    country_code: str = Field(alias="countryCode")
    website: Optional[str] = None
    message: str

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        return _min_length(v, 2, "Name must be at least 2 characters")

    @field_validator("email")
    @classmethod
    def _check_email(cls, v: str) -> str:
        try:
            validate_email(v, check_deliverability=False, test_environment=True)
        except EmailNotValidError:
            raise PydanticCustomError("invalid_email", "Invalid email address")
        return v

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, v: str) -> str:
        return _min_length(v, 10, "Phone number must be at least 10 digits")

    @field_validator("website")
    @classmethod
    def _check_website(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return v
        try:
            _url_adapter.validate_python(v)
        except ValidationError:
            raise PydanticCustomError("invalid_url", "Invalid website URL")
        return v

    @field_validator("message")
    @classmethod
    def _check_message(cls, v: str) -> str:
        return _min_length(v, 10, "Message must be at least 10 characters")


class FieldError(BaseModel):
    field: str
    message: str


class SubmitSuccess(BaseModel):
    success: Literal[True] = True
    message: str = SUCCESS_MESSAGE


class ValidationFailure(BaseModel):
    success: Literal[False] = False
    message: str = VALIDATION_MESSAGE
    errors: List[FieldError]


class DeliveryFailure(BaseModel):
    success: Literal[False] = False
    message: str = FAILURE_MESSAGE


SubmissionResult = Union[SubmitSuccess, ValidationFailure, DeliveryFailure]


def parse_result(data: Any) -> SubmissionResult:
    """Rebuild a result variant from its serialised form."""
    if not isinstance(data, dict) or not isinstance(data.get("success"), bool):
        raise ValueError("not a submission result")
    if data["success"]:
        return SubmitSuccess.model_validate(data)
    if data.get("errors") is not None:
        return ValidationFailure.model_validate(data)
    return DeliveryFailure.model_validate(data)
