from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, conint, constr, field_validator

from app.utils.coerce import coerce_boolean


def _check_active(value):
    if value is None or value == "":
        return value
    if coerce_boolean(value) is None:
        raise ValueError("active must be a boolean flag")
    return value


class CreateUserRequest(BaseModel):
    firstName: constr(strip_whitespace=True, min_length=1, max_length=255)
    lastName: constr(strip_whitespace=True, min_length=1, max_length=255)
    email: constr(strip_whitespace=True, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: constr(min_length=6)
    countryCode: Optional[constr(max_length=10)] = None
    phoneNumber: Optional[constr(max_length=30)] = None
    active: Optional[Union[bool, int, str]] = None
    role: Optional[constr(max_length=50)] = None
    zoneId: Optional[constr(max_length=255)] = None

    @field_validator("active")
    @classmethod
    def check_active(cls, value):
        return _check_active(value)


class UserListQuery(BaseModel):
    role: str = "customer"
    date_range: Optional[Literal["last_24_hours", "last_week", "last_month", "all_orders", "all_users"]] = None
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None
    active: Optional[str] = None
    zoneId: Optional[str] = None
    search: Optional[str] = None
    page: conint(ge=1) = 1
    limit: conint(ge=1, le=500) = 10
    type: Optional[str] = None

    @field_validator("active")
    @classmethod
    def check_active(cls, value):
        return _check_active(value)

    def filters(self) -> dict:
        return {
            "role": self.role,
            "date_range": self.date_range,
            "from": self.from_,
            "to": self.to,
            "active": self.active,
            "zoneId": self.zoneId,
            "search": self.search,
        }


class SetActiveRequest(BaseModel):
    active: Union[bool, int, str] = False

    @field_validator("active")
    @classmethod
    def check_active(cls, value):
        return _check_active(value)


class RecalculateCommissionRequest(BaseModel):
    limit: Optional[conint(ge=1)] = None
