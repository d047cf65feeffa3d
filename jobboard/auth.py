from __future__ import annotations
import logging

from . import security
from .config import settings
from .database import SERVER_TIMESTAMP, DocumentStore
from .errors import ConflictError, NotFoundError, UnauthorizedError
from .schemas import UserOut, UserRecord, to_public_user
from .validation import reject_blank, require_fields

logger = logging.getLogger(__name__)

USER_FIELDS = ("name", "email", "course", "password")


class IdentityManager:
    """
    Accounts and credentials.

    Email uniqueness is enforced here, not by the store: the lookup and the
    insert in ``register`` are two separate calls, so two concurrent
    registrations with the same email can both succeed. Stores that offer a
    unique index should be given one on ``email``.
    """

    def __init__(self, store: DocumentStore, collection: str | None = None):
        self.store = store
        self.collection = collection or settings.USERS_COLLECTION

    async def _get_record(self, user_id: str) -> UserRecord:
        doc = await self.store.get(self.collection, user_id)
        if doc is None:
            raise NotFoundError("Usuário não encontrado")
        return UserRecord.model_validate(doc)

    async def register(self, name: str | None, email: str | None, course: str | None,
                       password: str | None) -> UserOut:
        require_fields(
            {"name": name, "email": email, "course": course, "password": password},
            USER_FIELDS,
        )
        if await self.store.find(self.collection, "email", email):
            raise ConflictError("Email já cadastrado")

        hashed_pw = await security.hash_password_async(password)
        user_id = await self.store.add(self.collection, {
            "name": name,
            "email": email,
            "course": course,
            "password": hashed_pw,
            "saved": [],
            "createdAt": SERVER_TIMESTAMP,
            "updatedAt": SERVER_TIMESTAMP,
        })
        logger.info("Registered user %s", user_id)
        return to_public_user(await self._get_record(user_id))

    async def authenticate(self, email: str | None, password: str | None) -> UserOut:
        """
        Verify an email/password pair.

        An unknown email and a wrong password raise different errors; the
        HTTP layer reports both as 401.
        """
        require_fields({"email": email, "password": password}, ("email", "password"))
        matches = await self.store.find(self.collection, "email", email)
        if not matches:
            logger.warning("Login attempt for unknown email")
            raise NotFoundError("Usuário não encontrado")

        user = UserRecord.model_validate(matches[0])
        if not await security.verify_password_async(password, user.password):
            logger.warning("Incorrect password for user %s", user.id)
            raise UnauthorizedError("Senha incorreta")
        return to_public_user(user)

    async def get(self, user_id: str) -> UserOut:
        return to_public_user(await self._get_record(user_id))

    async def list_all(self) -> list[UserOut]:
        docs = await self.store.all(self.collection)
        return [to_public_user(UserRecord.model_validate(d)) for d in docs]

    async def update(self, user_id: str, changes: dict) -> UserOut:
        # null means "leave as is"; saved, id and timestamps are not client writable
        changes = {k: v for k, v in changes.items() if k in USER_FIELDS and v is not None}
        reject_blank(changes, USER_FIELDS)
        await self._get_record(user_id)

        if "password" in changes:
            changes["password"] = await security.hash_password_async(changes["password"])
        changes["updatedAt"] = SERVER_TIMESTAMP
        if not await self.store.update(self.collection, user_id, changes):
            raise NotFoundError("Usuário não encontrado")
        return await self.get(user_id)

    async def delete(self, user_id: str) -> None:
        await self._get_record(user_id)
        if not await self.store.delete(self.collection, user_id):
            raise NotFoundError("Usuário não encontrado")
        logger.info("Deleted user %s", user_id)
