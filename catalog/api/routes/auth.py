"""Account endpoints - register, login, password reset, existence check."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field, model_validator

from catalog.accounts import AccountService
from catalog.api.deps import get_account_service, raise_for_write
from catalog.models.common import CamelModel

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(CamelModel):
    """Request body for POST /auth/register."""

    name: str = Field(..., min_length=1)
    email: str | None = None
    phone_number: str | None = None
    password: str = Field(..., min_length=6)

    @model_validator(mode="after")
    def require_contact(self) -> "RegisterRequest":
        if not self.email and not self.phone_number:
            raise ValueError("email or phoneNumber is required")
        return self


class LoginRequest(CamelModel):
    """Request body for POST /auth/login."""

    contact: str = Field(..., min_length=1, description="Email or phone number")
    password: str


class ResetPasswordRequest(CamelModel):
    """Request body for POST /auth/reset-password."""

    contact: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> dict[str, Any]:
    """Register a new user.

    Returns:
        Public user fields (201); 409 if the contact is taken
    """
    outcome, user = await accounts.register(
        name=request.name,
        password=request.password,
        email=request.email,
        phone_number=request.phone_number,
    )
    raise_for_write(outcome, "User")
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="User was not created"
        )
    return user.public()


@router.post("/login")
async def login(
    request: LoginRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> dict[str, Any]:
    """Verify credentials.

    Returns:
        Public user fields; 401 on unknown contact or wrong password
    """
    user = await accounts.login(request.contact, request.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid contact or password",
        )
    return user.public()


@router.post("/reset-password")
async def reset_password(
    request: ResetPasswordRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> dict[str, str]:
    """Set a new password for the user owning the contact."""
    raise_for_write(await accounts.reset_password(request.contact, request.new_password), "User")
    return {"status": "ok"}


@router.get("/exists")
async def user_exists(
    contact: str,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> dict[str, bool]:
    """Check whether an email or phone number is registered."""
    return {"exists": await accounts.user_exists(contact)}
