from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import sessionmaker

from lexibranch.config import settings
from lexibranch.services.access import AccessChecker, ProjectMembershipAccess
from lexibranch.services.branches.creation import BranchCreationService
from lexibranch.services.branches.diff import DiffCalculator
from lexibranch.services.branches.merge import MergeExecutor
from lexibranch.services.events import EffectPublisher, LoggingPublisher
from lexibranch.services.keys import KeyService
from lexibranch.services.spaces import SpaceService

security_scheme = HTTPBearer(auto_error=False)


@dataclass
class Services:
    branches: BranchCreationService
    diff: DiffCalculator
    merge: MergeExecutor
    keys: KeyService
    spaces: SpaceService
    publisher: EffectPublisher


def build_services(
    session_factory: Optional[sessionmaker] = None,
    access: Optional[AccessChecker] = None,
    publisher: Optional[EffectPublisher] = None,
) -> Services:
    access = access or ProjectMembershipAccess()
    diff = DiffCalculator(session_factory, access)
    return Services(
        branches=BranchCreationService(session_factory, access),
        diff=diff,
        merge=MergeExecutor(session_factory, diff, access),
        keys=KeyService(session_factory, access),
        spaces=SpaceService(session_factory, access),
        publisher=publisher or LoggingPublisher(),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


def decode_actor_token(token: str) -> str:
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        ) from exc
    subject = payload.get("sub")
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )
    return str(subject)


async def get_actor_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_scheme),
) -> str:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication credentials were not provided",
        )
    return decode_actor_token(credentials.credentials)
