# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Signed, time-bounded session tokens.

A token is an itsdangerous-signed claim set::

    {"v": 1, "sub": <identifier>, "iss": <issuer>, "exp": <unix seconds>}

Tokens are stateless: nothing is stored server side, so there is no
revocation. Rotating the signing secret invalidates every outstanding token.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Optional

from itsdangerous import BadData, URLSafeTimedSerializer

from weightlog.errors import InvalidToken, WrongCredentials

logger = logging.getLogger(__name__)

CLAIMS_VERSION = 1


@dataclass(frozen=True)
class Identity:
    username: str


def ephemeral_secret() -> str:
    return secrets.token_urlsafe(64)


class SessionSigner:
    def __init__(
        self,
        secret_key: str,
        *,
        issuer: str,
        max_age: int,
        salt: str = "weightlog.session.v1",
        clock: Callable[[], float] = time.time,
    ):
        if not secret_key:
            raise ValueError("Empty signing secret")
        if max_age <= 0:
            raise ValueError("max_age must be > 0")
        self.issuer = issuer
        self.max_age = max_age
        self._clock = clock
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)

    def issue(self, identifier: str) -> str:
        claims = {
            "v": CLAIMS_VERSION,
            "sub": identifier,
            "iss": self.issuer,
            "exp": int(self._clock()) + self.max_age,
        }
        return self._serializer.dumps(claims)

    def verify(self, token: Optional[str]) -> Identity:
        if not token:
            raise InvalidToken()
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except BadData as e:
            logger.debug("Rejected token: %s", e.__class__.__name__)
            raise InvalidToken() from e

        if not isinstance(data, dict) or data.get("v") != CLAIMS_VERSION:
            logger.debug("Rejected token: unknown claim schema")
            raise InvalidToken()

        # Signed by us but for another issuer: reported as a credential problem.
        if data.get("iss") != self.issuer:
            logger.debug("Rejected token: issuer mismatch")
            raise WrongCredentials()

        exp = data.get("exp")
        if not isinstance(exp, int) or exp <= self._clock():
            logger.debug("Rejected token: expired")
            raise InvalidToken()

        sub = str(data.get("sub") or "").strip()
        if not sub:
            raise InvalidToken()
        return Identity(username=sub)
