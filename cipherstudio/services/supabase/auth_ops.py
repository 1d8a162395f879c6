"""Auth operations for Supabase repository"""

import asyncio
import logging

from cipherstudio.exceptions import SyncError, UnauthenticatedError
from cipherstudio.services.session import SessionContext

logger = logging.getLogger(__name__)


class AuthOpsMixin:
    """Mixin for resolving a user identity through Supabase Auth"""

    async def sign_in(self, email: str, password: str) -> SessionContext:
        """Sign in with email and password"""

        def _sync_sign_in():
            client = self._get_client()
            return client.auth.sign_in_with_password({"email": email, "password": password})

        try:
            response = await asyncio.to_thread(_sync_sign_in)
        except Exception as e:
            logger.warning(f"Sign in failed for {email}: {e}")
            raise UnauthenticatedError(f"Sign in failed: {e}") from e

        if response.user is None or response.session is None:
            raise UnauthenticatedError("Sign in returned no session")

        return SessionContext(
            user_id=response.user.id,
            access_token=response.session.access_token,
            email=response.user.email,
        )

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token"""

        def _sync_sign_out():
            client = self._get_client()
            client.auth.admin.sign_out(access_token)

        try:
            await asyncio.to_thread(_sync_sign_out)
        except Exception as e:
            logger.error(f"Sign out failed: {e}")
            raise SyncError(f"Sign out failed: {e}") from e

    async def get_session(self, access_token: str) -> SessionContext:
        """Resolve an access token (JWT) to its user"""
        if not access_token:
            raise UnauthenticatedError("Missing access token")

        def _sync_get_user():
            client = self._get_client()
            return client.auth.get_user(access_token)

        try:
            response = await asyncio.to_thread(_sync_get_user)
        except Exception as e:
            logger.warning(f"Token rejected: {e}")
            raise UnauthenticatedError("Invalid access token") from e

        if response is None or response.user is None:
            raise UnauthenticatedError("Invalid access token")

        return SessionContext(
            user_id=response.user.id,
            access_token=access_token,
            email=response.user.email,
        )
