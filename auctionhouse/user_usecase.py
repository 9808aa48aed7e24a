"""User use cases."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Protocol

from auctionhouse.entities import User


class _UserRepository(Protocol):
    def create_user(self, user: User) -> None: ...

    def find_users(self) -> list[User]: ...

    def find_user_by_id(self, user_id: str) -> User: ...


@dataclass(frozen=True)
class UserInputDTO:
    """A user as submitted by a client."""

    name: str


@dataclass(frozen=True)
class UserOutputDTO:
    """A user as returned to a client."""

    id: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}


class UserUseCase:
    """Create and look up users."""

    def __init__(self, repository: _UserRepository) -> None:
        self.repository = repository

    def create_user(self, user_input: UserInputDTO) -> UserOutputDTO:
        user = User(id=str(uuid.uuid4()), name=user_input.name)
        self.repository.create_user(user)
        return UserOutputDTO(id=user.id, name=user.name)

    def find_users(self) -> list[UserOutputDTO]:
        return [
            UserOutputDTO(id=user.id, name=user.name)
            for user in self.repository.find_users()
        ]

    def find_user_by_id(self, user_id: str) -> UserOutputDTO:
        user = self.repository.find_user_by_id(user_id)
        return UserOutputDTO(id=user.id, name=user.name)