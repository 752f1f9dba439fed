"""Password hashing."""

from passlib.context import CryptContext

pwd_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plaintext: str) -> str:
    return pwd_ctx.hash(plaintext)


def verify_password(plaintext: str, hashed: str) -> bool:
    # passlib compares digests in constant time
    if not plaintext or not hashed:
        return False
    return pwd_ctx.verify(plaintext, hashed)


def dummy_verify() -> None:
    """Spend the same time as a real verify when there is no hash to check."""
    pwd_ctx.dummy_verify()
