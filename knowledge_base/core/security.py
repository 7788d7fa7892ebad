from passlib.context import CryptContext

from knowledge_base.core.config import settings

def build_password_context(rounds: int) -> CryptContext:
    # bcrypt generates a fresh random salt for every hash
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds,
    )

# Default context for the process settings; DataStore builds its own when given other rounds
pwd_context = build_password_context(settings.bcrypt_rounds)

def hash_password(password: str, context: CryptContext = None) -> str:
    """Salt and hash a plaintext password"""
    return (context or pwd_context).hash(password)

def verify_password(password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored hash"""
    if not hashed_password:
        return False
    # The cost is read from the hash itself, so any context verifies any rounds
    return pwd_context.verify(password, hashed_password)
