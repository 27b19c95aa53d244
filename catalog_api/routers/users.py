from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from catalog_api.core.errors import ValidationFailed
from catalog_api.domain.validation import validate_credentials
from catalog_api.routers.deps import get_user_service
from catalog_api.services.authorization import BEARER_PREFIX
from catalog_api.services.user_service import UserService

router = APIRouter(tags=["users"])


class CredentialsPayload(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


def _validated(payload: CredentialsPayload) -> CredentialsPayload:
    violations = validate_credentials(payload.model_dump())
    if violations:
        raise ValidationFailed(violations)
    return payload


def _set_token(request: Request, response: Response, token: str) -> None:
    response.headers[request.app.state.settings.token_header] = BEARER_PREFIX + token


@router.post("/users", status_code=201)
def create_user(
    payload: CredentialsPayload,
    request: Request,
    response: Response,
    svc: UserService = Depends(get_user_service),
):
    creds = _validated(payload)
    user = svc.register(creds.username, creds.password)
    _set_token(request, response, svc.issue_token(user))
    return user.to_public()


@router.post("/auth")
def authenticate_user(
    payload: CredentialsPayload,
    request: Request,
    response: Response,
    svc: UserService = Depends(get_user_service),
):
    creds = _validated(payload)
    user = svc.authenticate(creds.username, creds.password)
    _set_token(request, response, svc.issue_token(user))
    return user.to_public()
