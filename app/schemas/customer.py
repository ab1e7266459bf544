import logging
from datetime import datetime
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.schemas.order import parse_timestamp, text_or_none

logger = logging.getLogger(__name__)


class CustomerRecord(BaseModel):
    """
    A registered storefront customer as kept in the `users` store document.

    Identity is the email address. Passwords or other extra keys in the
    stored document are ignored.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(min_length=1)
    join_date: datetime | None = Field(default=None, alias="joinDate")
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    role: str | None = "user"

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("join_date", mode="before")
    @classmethod
    def lenient_join_date(cls, v: Any) -> datetime | None:
        return parse_timestamp(v)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def lenient_name(cls, v: Any) -> str | None:
        return text_or_none(v)

    @field_validator("role", mode="before")
    @classmethod
    def default_role(cls, v: Any) -> str:
        return text_or_none(v) or "user"


def coerce_customers(raw_customers: Iterable[Any]) -> list[CustomerRecord]:
    """
    Validate customer documents one by one, keeping the first record per email.
    """
    customers: list[CustomerRecord] = []
    seen: set[str] = set()
    for raw in raw_customers:
        if isinstance(raw, CustomerRecord):
            customer = raw
        else:
            try:
                customer = CustomerRecord.model_validate(raw)
            except ValidationError:
                logger.warning("Skipping malformed customer record")
                continue
        if customer.email in seen:
            logger.warning("Skipping duplicate customer %s", customer.email)
            continue
        seen.add(customer.email)
        customers.append(customer)
    return customers
