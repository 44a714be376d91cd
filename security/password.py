from passlib.context import CryptContext

from core.config import settings

# bcrypt only looks at the first 72 bytes of a secret
_MAX_SECRET_BYTES = 72

_pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def _secret(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_SECRET_BYTES]


def hash_password(password: str) -> str:
    return _pwd_context.hash(_secret(password))


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check; malformed hashes never verify."""
    try:
        return _pwd_context.verify(_secret(password), password_hash)
    except ValueError:
        return False
