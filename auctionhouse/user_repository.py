"""MongoDB storage for users."""

from __future__ import annotations

from typing import Any

from pymongo.errors import PyMongoError

from auctionhouse import logger
from auctionhouse.entities import User
from auctionhouse.errors import InternalServerError, NotFoundError


class UserRepository:
    """Stores and looks up users."""

    def __init__(self, database: Any) -> None:
        self.collection = database["users"]

    def create_user(self, user: User) -> None:
        try:
            self.collection.insert_one({"_id": user.id, "name": user.name})
        except PyMongoError as exc:
            logger.error("Error trying to insert user", exc)
            raise InternalServerError("Error trying to insert user") from exc

    def find_users(self) -> list[User]:
        try:
            cursor = self.collection.find({})
        except PyMongoError as exc:
            logger.error("Error finding users", exc)
            raise InternalServerError("Error finding users") from exc
        try:
            return [User(id=doc["_id"], name=doc["name"]) for doc in cursor]
        except (PyMongoError, LookupError, TypeError) as exc:
            logger.error("Error decoding users", exc)
            raise InternalServerError("Error decoding users") from exc
        finally:
            close = getattr(cursor, "close", None)
            if callable(close):
                close()

    def find_user_by_id(self, user_id: str) -> User:
        try:
            document = self.collection.find_one({"_id": user_id})
        except PyMongoError as exc:
            logger.error("Error trying to find user by userId", exc)
            raise InternalServerError("Error trying to find user by userId") from exc
        if document is None:
            message = f"User not found with this id = {user_id}"
            logger.error(message, LookupError("no documents in result"))
            raise NotFoundError(message)
        try:
            return User(id=document["_id"], name=document["name"])
        except (LookupError, TypeError) as exc:
            logger.error("Error trying to find user by userId", exc)
            raise InternalServerError("Error trying to find user by userId") from exc