"""FastAPI routes for the caller's address book and profile."""

from fastapi import APIRouter

from identity.addresses import AddressBook, AddressDetails
from identity.api.schemas import (
    AddressResponse,
    CreateAddressRequest,
    ProfileResponse,
    UpdateAddressRequest,
    UpdateProfileRequest,
)
from identity.auth.dependencies import CurrentIdentity
from identity.profile import ProfileService
from shared.database import get_database
from shared.responses import ApiResponse

router = APIRouter(prefix="/addresses", tags=["addresses"])


def _address_book() -> AddressBook:
    return AddressBook(get_database())


@router.get("", response_model=ApiResponse[list[AddressResponse]])
def list_addresses(identity: CurrentIdentity) -> ApiResponse[list[AddressResponse]]:
    addresses = _address_book().list_addresses(identity.id)
    return ApiResponse(
        message="Addresses retrieved successfully",
        data=[AddressResponse.model_validate(address) for address in addresses],
    )


@router.post("", status_code=201, response_model=ApiResponse[AddressResponse])
def create_address(body: CreateAddressRequest, identity: CurrentIdentity) -> ApiResponse[AddressResponse]:
    address = _address_book().create_address(identity.id, AddressDetails(**body.model_dump()))
    return ApiResponse(message="Address added successfully", data=AddressResponse.model_validate(address))


@router.put("/{address_id}", response_model=ApiResponse[AddressResponse])
def update_address(
    address_id: str, body: UpdateAddressRequest, identity: CurrentIdentity
) -> ApiResponse[AddressResponse]:
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    address = _address_book().update_address(identity.id, address_id, changes)
    return ApiResponse(message="Address updated successfully", data=AddressResponse.model_validate(address))


@router.delete("/{address_id}", response_model=ApiResponse[None])
def delete_address(address_id: str, identity: CurrentIdentity) -> ApiResponse[None]:
    _address_book().delete_address(identity.id, address_id)
    return ApiResponse(message="Address deleted successfully")


@router.post("/{address_id}/default", response_model=ApiResponse[AddressResponse])
def set_default_address(address_id: str, identity: CurrentIdentity) -> ApiResponse[AddressResponse]:
    address = _address_book().set_default_address(identity.id, address_id)
    return ApiResponse(message="Default address updated", data=AddressResponse.model_validate(address))


# --- Profile endpoints ---

profile_router = APIRouter(prefix="/profile", tags=["profile"])


@profile_router.get("", response_model=ApiResponse[ProfileResponse])
def get_profile(identity: CurrentIdentity) -> ApiResponse[ProfileResponse]:
    user = ProfileService(get_database()).get_profile(identity.id)
    return ApiResponse(message="Profile retrieved successfully", data=ProfileResponse.model_validate(user))


@profile_router.put("", response_model=ApiResponse[ProfileResponse])
def update_profile(body: UpdateProfileRequest, identity: CurrentIdentity) -> ApiResponse[ProfileResponse]:
    user = ProfileService(get_database()).update_profile(identity.id, body.model_dump(exclude_unset=True))
    return ApiResponse(message="Profile updated successfully", data=ProfileResponse.model_validate(user))
