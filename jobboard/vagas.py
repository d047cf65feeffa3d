from __future__ import annotations
import logging

from .config import settings
from .database import SERVER_TIMESTAMP, DocumentStore
from .errors import NotFoundError
from .schemas import VagaOut
from .validation import reject_blank, require_fields

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "titulo",
    "empresa",
    "descricao",
    "requisitos",
    "salario",
    "localizacao",
    "tipo_contrato",
)
OPTIONAL_FIELDS = ("curso",)


class VagaManager:
    """Plain CRUD over job postings."""

    def __init__(self, store: DocumentStore, collection: str | None = None):
        self.store = store
        self.collection = collection or settings.VAGAS_COLLECTION

    async def create(self, data: dict) -> VagaOut:
        require_fields(data, REQUIRED_FIELDS)
        doc = {f: data[f] for f in REQUIRED_FIELDS}
        doc["curso"] = data.get("curso")
        doc["createdAt"] = SERVER_TIMESTAMP
        doc["updatedAt"] = SERVER_TIMESTAMP

        vaga_id = await self.store.add(self.collection, doc)
        logger.info("Created vaga %s", vaga_id)
        return await self.get(vaga_id)

    async def get(self, vaga_id: str) -> VagaOut:
        doc = await self.store.get(self.collection, vaga_id)
        if doc is None:
            raise NotFoundError("Vaga não encontrada")
        return VagaOut.model_validate(doc)

    async def list_all(self) -> list[VagaOut]:
        return [VagaOut.model_validate(d) for d in await self.store.all(self.collection)]

    async def update(self, vaga_id: str, changes: dict) -> VagaOut:
        """``changes`` holds only the fields the client sent; curso may be null."""
        changes = {
            k: v for k, v in changes.items()
            if (k in REQUIRED_FIELDS and v is not None) or k in OPTIONAL_FIELDS
        }
        reject_blank(changes, REQUIRED_FIELDS)
        await self.get(vaga_id)

        changes["updatedAt"] = SERVER_TIMESTAMP
        if not await self.store.update(self.collection, vaga_id, changes):
            raise NotFoundError("Vaga não encontrada")
        return await self.get(vaga_id)

    async def delete(self, vaga_id: str) -> None:
        # users that saved this vaga keep the id; SavedJobsManager.list_saved skips it
        if not await self.store.delete(self.collection, vaga_id):
            raise NotFoundError("Vaga não encontrada")
        logger.info("Deleted vaga %s", vaga_id)
