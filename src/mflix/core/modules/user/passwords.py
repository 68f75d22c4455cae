"""Salted one-way password hashing."""

import asyncio

import bcrypt

# bcrypt only reads the first 72 bytes; longer input is truncated rather than rejected
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


async def hash_password_async(password: str, rounds: int) -> str:
    """Hash in a worker thread so the event loop keeps serving requests."""
    return await asyncio.to_thread(hash_password, password, rounds)


async def check_password_async(password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(check_password, password, password_hash)
