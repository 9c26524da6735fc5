"""Authentication API router."""
from fastapi import APIRouter, Depends

from dependencies import get_account_service
from schemas import SignupRequest, LoginRequest, TokenResponse
from services.account_service import AccountService

router = APIRouter(tags=["authentication"])


@router.post("/signup", response_model=TokenResponse)
def signup(
    request: SignupRequest,
    accounts: AccountService = Depends(get_account_service)
):
    """
    Register a new user and return a token.

    Fails with 400 when the email is already registered.
    """
    token = accounts.signup(request.name, request.email, request.password)
    return {"success": True, "token": token}


@router.post("/login", response_model=TokenResponse)
def login(
    request: LoginRequest,
    accounts: AccountService = Depends(get_account_service)
):
    """
    Authenticate user and return token.

    A wrong email and a wrong password produce the same response.
    """
    token = accounts.login(request.email, request.password)
    return {"success": True, "token": token}
