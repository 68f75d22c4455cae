from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from mflix.web.deps import AppDep
from mflix.web.responses import Envelope

router = APIRouter(tags=["auth"])

TOKEN_COOKIE = "token"


class CredentialsRequest(BaseModel):
    """Email and password. Presence is checked by the service so both endpoints answer 400 alike."""

    email: str | None = Field(None, description="User email, the unique login key")
    password: str | None = Field(None, description="Plain-text password")


@router.post(
    "/auth/register",
    summary="Register user",
    description="Create a user account with the default role.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "User registered"},
        400: {"model": Envelope, "description": "Missing credentials"},
        409: {"model": Envelope, "description": "User already exists"},
    },
)
async def register(request: CredentialsRequest, app: AppDep) -> Envelope:
    user_id = await app.register(request.email, request.password)
    return Envelope(status=201, message="User registered", data={"user_id": str(user_id)})


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with email and password to receive a signed token, also set as an http-only cookie.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": Envelope, "description": "Missing credentials"},
        401: {"model": Envelope, "description": "Invalid credentials"},
    },
)
async def login(request: CredentialsRequest, app: AppDep, response: Response) -> Envelope:
    token = await app.login(request.email, request.password)

    # Set cookie for browser-based clients
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        secure=app.config.production,
        max_age=app.config.token_ttl_seconds,
        path="/",
    )

    return Envelope(status=200, message="Login successful", data={"token": token})


@router.post(
    "/auth/logout",
    summary="Log out",
    description="Clear the token cookie. The server-side session record stays until it expires.",
    operation_id="logout",
    responses={200: {"description": "Logged out"}},
)
async def logout(response: Response) -> Envelope:
    response.delete_cookie(TOKEN_COOKIE, path="/", httponly=True)
    return Envelope(status=200, message="Logged out successfully")
