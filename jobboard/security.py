"""
Password hashing and verification utilities.

Uses passlib's bcrypt for secure password storage. The async variants run
the hash in the threadpool so a login or registration never stalls other
requests on the event loop.
"""
from __future__ import annotations

from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext

from .config import settings

# Configure passlib context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """Return a bcrypt hash for the given plain password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hashed form."""
    return pwd_context.verify(plain_password, hashed_password)


async def hash_password_async(password: str) -> str:
    return await run_in_threadpool(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await run_in_threadpool(verify_password, plain_password, hashed_password)
