"""
api/routes/auth.py -- Registration and password login endpoints.

Routes:
  POST /api/register  -- create an account; the first account becomes admin
  POST /api/login     -- check a username/password pair

Neither route issues a session or token. A successful login only reports the
user's identity and admin flag back to the frontend.

Security:
  authenticate_user() provides timing equalization -- use it, never inline
  get_by_username() + verify_password().
  Cache-Control: no-store on every login response.
  A duplicate username surfaces as IntegrityError and is turned into a 400 by
  the SQLAlchemyError handler in api/main.py.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from api.models import AuthResponse, CredentialsRequest, ErrorResponse, UserOut
from auth.security import authenticate_user, register_user
from auth.store import UserStore

router = APIRouter()

_INVALID_CREDENTIALS = "Invalid credentials"


def _require_credentials(body: CredentialsRequest) -> None:
    missing = body.missing_fields()
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing required field(s): {', '.join(missing)}")


@router.post("/register", response_model=AuthResponse)
def register(request: Request, body: CredentialsRequest) -> AuthResponse:
    """Create an account and return its public view."""
    _require_credentials(body)
    user_store: UserStore = request.app.state.user_store
    user = register_user(user_store, body.username, body.password)
    return AuthResponse(user=UserOut.from_user(user))


@router.post("/login", response_model=AuthResponse)
def login(request: Request, body: CredentialsRequest) -> JSONResponse:
    """Check credentials.

    Returns the same 401 body for an unknown username and a wrong password so
    callers cannot tell which part was wrong.
    """
    _require_credentials(body)
    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.username, body.password)
    if user is None:
        resp = JSONResponse(status_code=401, content=ErrorResponse(error=_INVALID_CREDENTIALS).model_dump())
    else:
        resp = JSONResponse(status_code=200, content=AuthResponse(user=UserOut.from_user(user)).model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp
