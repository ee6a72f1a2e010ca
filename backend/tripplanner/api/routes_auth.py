from fastapi import APIRouter, Depends

from tripplanner.api import get_bearer_token, get_current_user, get_identity
from tripplanner.auth.identity import LocalIdentityProvider
from tripplanner.models.domain import User
from tripplanner.models.schemas import AuthResponse, CredentialsRequest, MeResponse

router = APIRouter()


@router.post("/auth/signup", response_model=AuthResponse)
def sign_up(
    req: CredentialsRequest, identity: LocalIdentityProvider = Depends(get_identity)
) -> AuthResponse:
    return AuthResponse.from_domain(identity.sign_up(str(req.email), req.password))


@router.post("/auth/signin", response_model=AuthResponse)
def sign_in(
    req: CredentialsRequest, identity: LocalIdentityProvider = Depends(get_identity)
) -> AuthResponse:
    return AuthResponse.from_domain(identity.sign_in(str(req.email), req.password))


@router.post("/auth/signout")
def sign_out(
    token: str = Depends(get_bearer_token),
    identity: LocalIdentityProvider = Depends(get_identity),
) -> dict:
    identity.sign_out(token)
    return {"status": "signed_out"}


@router.get("/me", response_model=MeResponse)
def me(user: User = Depends(get_current_user)) -> MeResponse:
    return MeResponse.from_domain(user)
