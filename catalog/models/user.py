"""User account model."""

from catalog.models.common import CamelModel


class User(CamelModel):
    """Registered user.

    ``password`` holds the stored password token (a salted hash produced by
    the account service).
    """

    id: str
    name: str
    email: str | None = None
    phone_number: str | None = None
    password: str | None = None

    def public(self) -> dict:
        """Document without the password token."""
        data = self.to_document()
        data.pop("password", None)
        return data
