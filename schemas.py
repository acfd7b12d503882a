"""
Request schemas.

Every write goes through ``parse`` which turns a loose JSON body into one of the
command objects below. JSON keys are camelCase (``flightNumber``), attributes
are snake_case.
"""
from datetime import datetime
from typing import ClassVar, FrozenSet, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from errors import ValidationError
from model import BannerType, GalleryCategory, Role
from status import to_utc_naive

URL_PATTERN = r"^https?://.+"


class Command(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    # patch fields that may be explicitly cleared with null
    nullable: ClassVar[FrozenSet[str]] = frozenset()

    def changes(self):
        """Fields that were present in the request, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _lookup(data, name, field):
    key = field.alias or name
    if key in data:
        return key, data[key]
    return key, data.get(name)


def parse(schema, data, partial=False):
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", code="invalid_body")

    for name, field in schema.model_fields.items():
        key, value = _lookup(data, name, field)
        if partial:
            present = key in data or name in data
            if present and name not in schema.nullable and _is_blank(value):
                raise ValidationError(f"{key} cannot be empty", code="missing_field", field=key)
        elif field.is_required() and _is_blank(value):
            raise ValidationError(f"{key} is required", code="missing_field", field=key)

    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or None
        message = f"{field}: {error['msg']}" if field else error["msg"]
        raise ValidationError(message, code="invalid_field", field=field) from None


def _utc(value):
    return to_utc_naive(value) if value is not None else value


# Flights

class FlightCreate(Command):
    flight_number: str = Field(min_length=3, max_length=20)
    origin: str = Field(min_length=2, max_length=100)
    destination: str = Field(min_length=2, max_length=100)
    departure_date: datetime
    arrival_date: datetime
    company_id: int
    duration: Optional[int] = None
    economy_price: float = Field(default=0, ge=0)
    economy_seats: int = Field(default=0, ge=0)
    comfort_price: float = Field(default=0, ge=0)
    comfort_seats: int = Field(default=0, ge=0)
    business_price: float = Field(default=0, ge=0)
    business_seats: int = Field(default=0, ge=0)
    is_active: bool = True

    @field_validator("departure_date", "arrival_date")
    @classmethod
    def dates_as_utc(cls, value):
        return _utc(value)


class FlightUpdate(Command):
    flight_number: Optional[str] = Field(default=None, min_length=3, max_length=20)
    origin: Optional[str] = Field(default=None, min_length=2, max_length=100)
    destination: Optional[str] = Field(default=None, min_length=2, max_length=100)
    departure_date: Optional[datetime] = None
    arrival_date: Optional[datetime] = None
    company_id: Optional[int] = None
    duration: Optional[int] = None
    economy_price: Optional[float] = Field(default=None, ge=0)
    economy_seats: Optional[int] = Field(default=None, ge=0)
    comfort_price: Optional[float] = Field(default=None, ge=0)
    comfort_seats: Optional[int] = Field(default=None, ge=0)
    business_price: Optional[float] = Field(default=None, ge=0)
    business_seats: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("departure_date", "arrival_date")
    @classmethod
    def dates_as_utc(cls, value):
        return _utc(value)


class FlightSearch(Command):
    origin: Optional[str] = None
    destination: Optional[str] = None
    departure_date: Optional[datetime] = None
    company_id: Optional[int] = None

    @field_validator("departure_date", mode="before")
    @classmethod
    def accept_plain_date(cls, value):
        # "2026-10-20" is the usual search form
        if isinstance(value, str) and len(value) == 10:
            return value + "T00:00:00"
        return value

    @field_validator("departure_date")
    @classmethod
    def date_as_utc(cls, value):
        return _utc(value)


# Bookings

class BookingCreate(Command):
    user_id: str
    flight_id: str
    passenger_name: str = Field(min_length=2, max_length=100)
    passenger_email: str
    seat_class: str
    price: float = Field(ge=0)

    @field_validator("user_id", "flight_id", mode="before")
    @classmethod
    def ids_as_text(cls, value):
        # identities are checked by the booking rules, not here
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class BookingUpdate(Command):
    passenger_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    passenger_email: Optional[str] = None


# Companies

class CompanyCreate(Command):
    name: str = Field(min_length=2, max_length=100)
    code: str = Field(pattern=r"^[A-Z]{2,3}$")
    manager_id: int
    is_active: bool = True


class CompanyUpdate(Command):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    code: Optional[str] = Field(default=None, pattern=r"^[A-Z]{2,3}$")
    manager_id: Optional[int] = None
    is_active: Optional[bool] = None


# Users

class UserCreate(Command):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=2, max_length=100)
    role: Role = Role.USER
    is_active: bool = True


class UserUpdate(Command):
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    role: Optional[Role] = None
    is_active: Optional[bool] = None


class Register(Command):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=2, max_length=100)


class Login(Command):
    # normalised the same way as on sign-up, so lookups match the stored address
    email: EmailStr
    password: str


class PasswordChange(Command):
    current_password: str
    new_password: str = Field(min_length=6, max_length=128)


# Banners and gallery

class BannerCreate(Command):
    title: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=5, max_length=500)
    image_url: str = Field(pattern=URL_PATTERN)
    duration: int = Field(ge=1)
    type: BannerType
    link: Optional[str] = Field(default=None, pattern=URL_PATTERN)
    active: bool = True

    @field_validator("link", mode="before")
    @classmethod
    def blank_link_clears(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class BannerUpdate(Command):
    nullable: ClassVar[FrozenSet[str]] = frozenset({"link"})

    title: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, min_length=5, max_length=500)
    image_url: Optional[str] = Field(default=None, pattern=URL_PATTERN)
    duration: Optional[int] = Field(default=None, ge=1)
    type: Optional[BannerType] = None
    link: Optional[str] = Field(default=None, pattern=URL_PATTERN)
    active: Optional[bool] = None

    @field_validator("link", mode="before")
    @classmethod
    def blank_link_clears(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class GalleryCreate(Command):
    title: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=5, max_length=500)
    image_url: str = Field(pattern=URL_PATTERN)
    category: GalleryCategory
    active: bool = True


class GalleryUpdate(Command):
    title: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, min_length=5, max_length=500)
    image_url: Optional[str] = Field(default=None, pattern=URL_PATTERN)
    category: Optional[GalleryCategory] = None
    active: Optional[bool] = None
