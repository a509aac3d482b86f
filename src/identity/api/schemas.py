"""Pydantic request/response schemas for the address book and profile APIs."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from identity.models import AddressType, Role

PHONE_PATTERN = r"^[0-9]{10}$"
PINCODE_PATTERN = r"^[0-9]{6}$"


class CreateAddressRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Asha Rao",
                    "phone": "9876543210",
                    "street": "12 MG Road, Indiranagar",
                    "city": "Bengaluru",
                    "state": "Karnataka",
                    "pincode": "560038",
                    "type": "HOME",
                    "is_default": True,
                }
            ]
        }
    }

    name: str = Field(..., min_length=2, max_length=100)
    phone: str = Field(..., pattern=PHONE_PATTERN)
    street: str = Field(..., min_length=5, max_length=200)
    city: str = Field(..., min_length=2, max_length=50)
    state: str = Field(..., min_length=2, max_length=50)
    pincode: str = Field(..., pattern=PINCODE_PATTERN)
    country: str = Field("India", min_length=2, max_length=50)
    type: AddressType = AddressType.HOME
    is_default: bool = False


class UpdateAddressRequest(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    phone: str | None = Field(None, pattern=PHONE_PATTERN)
    street: str | None = Field(None, min_length=5, max_length=200)
    city: str | None = Field(None, min_length=2, max_length=50)
    state: str | None = Field(None, min_length=2, max_length=50)
    pincode: str | None = Field(None, pattern=PINCODE_PATTERN)
    country: str | None = Field(None, min_length=2, max_length=50)
    type: AddressType | None = None
    is_default: bool | None = None


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    phone: str
    street: str
    city: str
    state: str
    pincode: str
    country: str
    type: AddressType
    is_default: bool
    created_at: datetime


class UpdateProfileRequest(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, pattern=PHONE_PATTERN)
    avatar: str | None = Field(None, max_length=500)


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str
    last_name: str | None = None
    phone: str | None = None
    avatar: str | None = None
    role: Role
    created_at: datetime
