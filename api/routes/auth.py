"""
api/routes/auth.py -- Account and session endpoints.

Routes:
  POST /signup     -- create an account; 201 {message, userId}
  POST /signin     -- password login; 200 {message, token, role}
  GET  /dashboard  -- greeting for the token holder (requires token)

Security:
  Signup and signin are rate-limited per client IP (LOGIN_RATE_LIMIT).
  authenticate_user() provides timing equalization -- use it, never inline.
  Wrong username and wrong password return the same 401 message so the
  response does not reveal which usernames exist.
  Cache-Control: no-store on signin responses (they carry a token).

Handlers are plain `def` so FastAPI runs them in its thread pool: bcrypt is
CPU-bound and must not block the event loop for unrelated requests.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response

from api.limiter import credential_limit
from api.models import MessageResponse, SigninRequest, SigninResponse, SignupRequest, SignupResponse
from api.routes.common import require_fields, store_errors
from auth.dependencies import verify_token
from auth.models import Identity, User
from auth.store import UserStore
from auth.tokens import authenticate_user, create_access_token, hash_password
from core.errors import AuthError

logger = logging.getLogger("elibrary.api")

# Auth policy:
# - POST /signup:    public
# - POST /signin:    public
# - GET  /dashboard: requires token (verify_token)
router = APIRouter()


@credential_limit
@router.post("/signup", response_model=SignupResponse, status_code=201)
def signup(request: Request, body: SignupRequest) -> SignupResponse:
    """Create a user account. role defaults to "user" when omitted."""
    require_fields(body.username, body.password, body.first_name, body.last_name)

    user_store: UserStore = request.app.state.user_store
    user = User(
        username=body.username,
        hashed_password=hash_password(body.password),
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role.value,
    )
    with store_errors("Error creating user"):
        user_id = user_store.create_user(user)

    logger.info("User %r created (id=%d, role=%s)", user.username, user_id, user.role)
    return SignupResponse(message="User created successfully!", user_id=user_id)


@credential_limit
@router.post("/signin", response_model=SigninResponse)
def signin(request: Request, response: Response, body: SigninRequest) -> SigninResponse:
    """Verify credentials and issue a one-hour session token."""
    require_fields(body.username, body.password, message="Missing username or password")

    user_store: UserStore = request.app.state.user_store
    with store_errors("Internal server error"):
        user = authenticate_user(user_store, body.username, body.password)
    if user is None:
        logger.info("Failed signin for %r", body.username)
        raise AuthError("Invalid username or password")

    token = create_access_token(user.id, user.username, user.role)
    response.headers["Cache-Control"] = "no-store"
    return SigninResponse(message="Login successful", token=token, role=user.role)


@router.get("/dashboard", response_model=MessageResponse)
def dashboard(identity: Identity = Depends(verify_token)) -> MessageResponse:
    return MessageResponse(message=f"Welcome {identity.username}, this is a protected dashboard!")
