"""User accounts: registration, login and password reset.

Passwords are stored as salted PBKDF2-SHA256 tokens of the form
``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>``.
"""

import hashlib
import hmac
import logging
import secrets
import uuid

from catalog.db.base import WriteResult
from catalog.db.repositories import UserRepository
from catalog.models.user import User

logger = logging.getLogger(__name__)

_SCHEME = "pbkdf2_sha256"


def hash_password(password: str, iterations: int = 260_000) -> str:
    """Hash a password with a fresh random salt."""
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{_SCHEME}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, token: str | None) -> bool:
    """Check a password against a stored token in constant time."""
    if not token:
        return False

    try:
        scheme, iterations_str, salt_hex, digest_hex = token.split("$")
        iterations = int(iterations_str)
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(digest_hex)
    except ValueError:
        return False

    if scheme != _SCHEME:
        return False

    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(digest, expected)


class AccountService:
    """Account workflows on top of the users collection."""

    def __init__(self, users: UserRepository, hash_iterations: int = 260_000) -> None:
        self._users = users
        self._hash_iterations = hash_iterations

    async def user_exists(self, contact: str) -> bool:
        """Check whether an email or phone number is registered."""
        return await self._users.find_by_contact(contact) is not None

    async def register(
        self,
        *,
        name: str,
        password: str,
        email: str | None = None,
        phone_number: str | None = None,
    ) -> tuple[WriteResult, User | None]:
        """Create a user with a freshly minted id.

        Returns:
            (outcome, user); CONFLICT if the email or phone is already registered
        """
        for contact in (email, phone_number):
            if contact and await self.user_exists(contact):
                return WriteResult.CONFLICT, None

        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email or None,
            phone_number=phone_number or None,
            password=hash_password(password, self._hash_iterations),
        )
        outcome = await self._users.add(user)
        if not outcome:
            return outcome, None

        logger.info(f"Registered user {user.id}")
        return outcome, user

    async def login(self, contact: str, password: str) -> User | None:
        """Return the user if the contact exists and the password verifies."""
        user = await self._users.find_by_contact(contact)
        if user is None or not verify_password(password, user.password):
            return None
        return user

    async def reset_password(self, contact: str, new_password: str) -> WriteResult:
        """Replace the password of the user owning the contact."""
        user = await self._users.find_by_contact(contact)
        if user is None:
            return WriteResult.NOT_FOUND

        return await self._users.set_password(
            user.id, hash_password(new_password, self._hash_iterations)
        )
