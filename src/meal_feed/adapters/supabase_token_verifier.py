"""Bearer token verification through Supabase auth."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from supabase import Client

_logger = logging.getLogger(__name__)


class TokenVerifier(Protocol):
    """Interface for resolving an access token to a user id."""

    async def verify(self, token: str) -> UUID | None:
        """Return the user id for a valid token, otherwise None."""


@dataclass
class SupabaseTokenVerifier(TokenVerifier):
    """Verify access tokens with the Supabase auth API."""

    client: Client

    async def verify(self, token: str) -> UUID | None:
        """Return the authenticated user's id, or None if the token is rejected."""
        try:
            response = await asyncio.to_thread(self.client.auth.get_user, token)
        except Exception as exc:
            _logger.info("Rejected access token: %s", exc)
            return None
        user = getattr(response, "user", None)
        if user is None:
            return None
        return UUID(str(user.id))
