"""Address book management: at most one default address per user."""

from dataclasses import asdict, dataclass

import structlog
from sqlalchemy import select, update

from identity.models import Address, AddressType
from shared.database import Database
from shared.errors import AddressNotFoundError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AddressDetails:
    name: str
    phone: str
    street: str
    city: str
    state: str
    pincode: str
    country: str = "India"
    type: AddressType = AddressType.HOME
    is_default: bool = False


class AddressBook:
    def __init__(self, database: Database) -> None:
        self.database = database

    def list_addresses(self, user_id: str) -> list[Address]:
        with self.database.transaction(read_only=True) as session:
            return list(
                session.scalars(
                    select(Address)
                    .where(Address.user_id == user_id)
                    .order_by(Address.is_default.desc(), Address.created_at.desc())
                )
            )

    def get_address(self, user_id: str, address_id: str) -> Address:
        with self.database.transaction(read_only=True) as session:
            return self._owned(session, user_id, address_id)

    def create_address(self, user_id: str, details: AddressDetails) -> Address:
        with self.database.transaction() as session:
            has_addresses = session.scalar(select(Address.id).where(Address.user_id == user_id).limit(1))
            make_default = details.is_default or has_addresses is None

            if make_default:
                self._clear_default(session, user_id)
            address = Address(user_id=user_id, **{**asdict(details), "is_default": make_default})
            session.add(address)

        logger.info("Address created", user_id=user_id, address_id=address.id, is_default=make_default)
        return address

    def update_address(self, user_id: str, address_id: str, changes: dict) -> Address:
        with self.database.transaction() as session:
            address = self._owned(session, user_id, address_id)
            if changes.get("is_default"):
                self._clear_default(session, user_id)
            for field, value in changes.items():
                setattr(address, field, value)
        return address

    def delete_address(self, user_id: str, address_id: str) -> None:
        with self.database.transaction() as session:
            session.delete(self._owned(session, user_id, address_id))

    def set_default_address(self, user_id: str, address_id: str) -> Address:
        with self.database.transaction() as session:
            address = self._owned(session, user_id, address_id)
            self._clear_default(session, user_id)
            address.is_default = True
        return address

    @staticmethod
    def _clear_default(session, user_id: str) -> None:
        session.execute(
            update(Address)
            .where(Address.user_id == user_id, Address.is_default.is_(True))
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )

    @staticmethod
    def _owned(session, user_id: str, address_id: str) -> Address:
        address = session.scalars(
            select(Address).where(Address.id == address_id, Address.user_id == user_id)
        ).one_or_none()
        if address is None:
            raise AddressNotFoundError()
        return address
