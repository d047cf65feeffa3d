"""
Saved jobs: the many-to-many relation between users and vagas.

The relation lives inside each user document as the ``saved`` list of vaga
ids. Vagas know nothing about who saved them, so deleting a vaga leaves
stale ids behind; ``list_saved`` drops those instead of failing.
"""
from __future__ import annotations
import asyncio
import logging

from .config import settings
from .database import SERVER_TIMESTAMP, ArrayRemove, ArrayUnion, DocumentStore
from .errors import AlreadySavedError, NotFoundError, NotSavedError
from .schemas import VagaOut

logger = logging.getLogger(__name__)


class SavedJobsManager:
    def __init__(self, store: DocumentStore, users_collection: str | None = None,
                 vagas_collection: str | None = None):
        self.store = store
        self.users = users_collection or settings.USERS_COLLECTION
        self.vagas = vagas_collection or settings.VAGAS_COLLECTION

    async def _get_user(self, user_id: str) -> dict:
        user = await self.store.get(self.users, user_id)
        if user is None:
            raise NotFoundError("Usuário não encontrado")
        return user

    async def add(self, user_id: str, vaga_id: str) -> None:
        user, vaga = await asyncio.gather(
            self.store.get(self.users, user_id),
            self.store.get(self.vagas, vaga_id),
        )
        if user is None:
            raise NotFoundError("Usuário não encontrado")
        if vaga is None:
            raise NotFoundError("Vaga não encontrada")
        if vaga_id in (user.get("saved") or []):
            raise AlreadySavedError("Vaga já está salva")

        await self.store.update(self.users, user_id, {
            "saved": ArrayUnion(vaga_id),
            "updatedAt": SERVER_TIMESTAMP,
        })
        logger.info("User %s saved vaga %s", user_id, vaga_id)

    async def remove(self, user_id: str, vaga_id: str) -> None:
        user = await self._get_user(user_id)
        if vaga_id not in (user.get("saved") or []):
            raise NotSavedError("Vaga não está salva")

        await self.store.update(self.users, user_id, {
            "saved": ArrayRemove(vaga_id),
            "updatedAt": SERVER_TIMESTAMP,
        })
        logger.info("User %s removed saved vaga %s", user_id, vaga_id)

    async def list_saved(self, user_id: str) -> list[VagaOut]:
        user = await self._get_user(user_id)
        saved = user.get("saved") or []
        if not saved:
            return []

        docs = await asyncio.gather(*(self.store.get(self.vagas, vaga_id) for vaga_id in saved))
        return [VagaOut.model_validate(doc) for doc in docs if doc is not None]
