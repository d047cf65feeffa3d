from datetime import datetime
from typing import Union
from pydantic import BaseModel, Field, field_validator

# Request bodies. Every field is optional at the parsing stage; presence and
# emptiness are checked by the managers so that missing fields answer 400.

class UserCreate(BaseModel):
    name: str | None = None
    email: str | None = None
    course: str | None = None
    password: str | None = None

class UserUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    course: str | None = None
    password: str | None = None

class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None

Salary = Union[str, int, float]

class VagaCreate(BaseModel):
    titulo: str | None = None
    empresa: str | None = None
    descricao: str | None = None
    requisitos: str | None = None
    salario: Salary | None = None
    localizacao: str | None = None
    tipo_contrato: str | None = None
    curso: str | None = None

class VagaUpdate(VagaCreate):
    pass

# Users

class UserOut(BaseModel):
    id: str
    name: str
    email: str
    course: str
    saved: list[str] = Field(default_factory=list)
    createdAt: datetime | None = None
    updatedAt: datetime | None = None

    @field_validator("saved", mode="before")
    @classmethod
    def _saved_default(cls, v):
        return [] if v is None else v

class UserRecord(UserOut):
    """Stored user, including the password hash. Never returned to clients."""
    password: str

def to_public_user(record: UserRecord) -> UserOut:
    return UserOut(**record.model_dump(exclude={"password"}))

# Vagas

class VagaOut(BaseModel):
    id: str
    titulo: str
    empresa: str
    descricao: str
    requisitos: str
    salario: Salary
    localizacao: str
    tipo_contrato: str
    curso: str | None = None
    createdAt: datetime | None = None
    updatedAt: datetime | None = None

# Response envelopes

class ApiResponse(BaseModel):
    success: bool
    message: str | None = None

class UserResponse(ApiResponse):
    user: UserOut

class UsersResponse(ApiResponse):
    users: list[UserOut]

class VagaResponse(ApiResponse):
    vaga: VagaOut

class VagasResponse(ApiResponse):
    vagas: list[VagaOut]

class HealthOut(BaseModel):
    status: str
    database: str
