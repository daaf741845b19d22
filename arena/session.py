"""
Session context.

Identity travels as an explicit SessionContext loaded from a signed JWT
(cookie or bearer header), rather than from ambient client-side state.
"""

import logging
import time
from dataclasses import dataclass, asdict
from typing import Optional

from fastapi import Request, Response
from jose import jwt, JWTError

from arena.config import (
    JWT_SECRET_KEY, JWT_ALGORITHM, SESSION_COOKIE_NAME, SESSION_TTL_SECONDS
)

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    user_id: str
    username: str = ""
    prn: str = ""
    email: str = ""

    @classmethod
    def from_user(cls, user: dict) -> "SessionContext":
        return cls(
            user_id=str(user.get("id")),
            username=user.get("username") or "",
            prn=user.get("prn") or "",
            email=user.get("email") or "",
        )

    def to_dict(self) -> dict:
        return asdict(self)


class SessionManager:

    def __init__(
        self,
        secret_key: str = JWT_SECRET_KEY,
        algorithm: str = JWT_ALGORITHM,
        cookie_name: str = SESSION_COOKIE_NAME,
        ttl_seconds: int = SESSION_TTL_SECONDS,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.cookie_name = cookie_name
        self.ttl_seconds = ttl_seconds

    def encode(self, ctx: SessionContext) -> str:
        now = int(time.time())
        claims = {
            "sub": ctx.user_id,
            "username": ctx.username,
            "prn": ctx.prn,
            "email": ctx.email,
            "iat": now,
            "exp": now + self.ttl_seconds,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> Optional[SessionContext]:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

        user_id = payload.get("sub")
        if not user_id:
            return None
        return SessionContext(
            user_id=user_id,
            username=payload.get("username", ""),
            prn=payload.get("prn", ""),
            email=payload.get("email", ""),
        )

    # ==================== LIFECYCLE ====================

    def load(self, request: Request) -> Optional[SessionContext]:
        token = request.cookies.get(self.cookie_name)

        if not token:
            authorization = request.headers.get("authorization", "")
            if authorization.startswith("Bearer "):
                token = authorization.split(" ", 1)[1]

        if not token:
            return None
        return self.decode(token)

    def save(self, response: Response, ctx: SessionContext) -> str:
        token = self.encode(ctx)
        response.set_cookie(
            self.cookie_name,
            token,
            max_age=self.ttl_seconds,
            httponly=True,
            samesite="lax",
            path="/",
        )
        logger.info("[SESSION] started for user %s", ctx.user_id)
        return token

    def clear(self, response: Response) -> None:
        response.delete_cookie(self.cookie_name, path="/")


session_manager = SessionManager()
