from dataclasses import dataclass
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from ..core.clock import Clock, SystemClock
from ..core.security import decode_access_token


# tokens are issued by the hosted auth platform
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")


@dataclass(slots=True)
class Principal:
    subject: str
    role: str


def get_clock() -> Clock:
    return SystemClock()


def get_current_admin(token: Annotated[str, Depends(oauth2_scheme)]) -> Principal:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
    )
    try:
        claims = decode_access_token(token)
    except JWTError as exc:
        raise credentials_exception from exc
    return Principal(subject=str(claims["sub"]), role=str(claims["role"]))


def require_roles(*roles: str):
    def dependency(user: Annotated[Principal, Depends(get_current_admin)]) -> Principal:
        if user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user

    return dependency
