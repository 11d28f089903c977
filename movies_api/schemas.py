"""Shared pydantic base models and field types."""
from typing import Annotated
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def _check_email(value: str) -> str:
    # Emails are matched exactly as stored, so the address is kept as sent
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class CamelModel(BaseModel):
    """Model serialized with camelCase keys, populated by either form."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
