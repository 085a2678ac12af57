# backend/userapi/core/security.py

from passlib.context import CryptContext


def make_pwd_context(rounds: int) -> CryptContext:
    # ONLY pbkdf2_sha256; rounds is the work factor
    return CryptContext(
        schemes=["pbkdf2_sha256"],
        deprecated="auto",
        pbkdf2_sha256__default_rounds=rounds,
    )


def hash_password(password: str, context: CryptContext) -> str:
    return context.hash(password)


def verify_password(plain_password: str, hashed_password, context: CryptContext) -> bool:
    if not hashed_password or not hashed_password.startswith("$pbkdf2-sha256$"):
        return False

    return context.verify(plain_password or "", hashed_password)
