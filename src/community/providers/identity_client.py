"""Firebase Authentication client for account credentials."""

import asyncio
import logging
import os

import httpx
from firebase_admin import auth
from firebase_admin import exceptions as firebase_exceptions

from community.exceptions import AuthenticationError, DuplicateEmailError, StoreError

logger = logging.getLogger(__name__)

# Identity Toolkit error codes that mean "wrong email or password"
_CREDENTIAL_ERRORS = {
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "INVALID_EMAIL",
    "USER_DISABLED",
}


class IdentityClient:
    """
    Wrapper around Firebase Authentication.

    Account creation and deletion go through the Admin SDK. Password checks
    use the Identity Toolkit REST endpoint, which the Admin SDK does not expose.
    """

    API_BASE = "https://identitytoolkit.googleapis.com/v1"

    def __init__(
        self,
        api_key: str,
        use_emulator: bool = False,
        emulator_host: str = "localhost:9099",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        """
        Initialize identity client.

        Args:
            api_key: Firebase Web API key.
            use_emulator: Whether to use the Firebase Auth Emulator.
            emulator_host: Emulator host:port.
            http_client: Optional shared HTTP client (one is opened per call otherwise).
            timeout: HTTP timeout in seconds.
        """
        self.api_key = api_key
        self.timeout = timeout
        self._http_client = http_client

        if use_emulator:
            os.environ["FIREBASE_AUTH_EMULATOR_HOST"] = emulator_host
            self.api_base = f"http://{emulator_host}/identitytoolkit.googleapis.com/v1"
        else:
            self.api_base = self.API_BASE

    async def create_account(self, email: str, password: str, display_name: str) -> str:
        """
        Create a credential record.

        Returns:
            UID of the new account.

        Raises:
            DuplicateEmailError: If the email is already registered.
            StoreError: If the identity service call fails.
        """
        try:
            record = await asyncio.to_thread(
                auth.create_user,
                email=email,
                password=password,
                display_name=display_name,
            )
        except auth.EmailAlreadyExistsError:
            raise DuplicateEmailError(email)
        except firebase_exceptions.FirebaseError as e:
            logger.error(f"Account creation failed: {e}")
            raise StoreError("Identity service unavailable") from e
        return record.uid

    async def delete_account(self, uid: str) -> None:
        """Delete a credential record."""
        try:
            await asyncio.to_thread(auth.delete_user, uid)
        except firebase_exceptions.FirebaseError as e:
            logger.error(f"Account deletion failed for {uid}: {e}")
            raise StoreError("Identity service unavailable") from e

    async def verify_password(self, email: str, password: str) -> str:
        """
        Check an email/password pair.

        Returns:
            UID of the matching account.

        Raises:
            AuthenticationError: If the credentials do not match.
            StoreError: If the identity service cannot be reached.
        """
        url = f"{self.api_base}/accounts:signInWithPassword"
        payload = {"email": email, "password": password, "returnSecureToken": False}

        try:
            response = await self._post(url, params={"key": self.api_key}, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Password sign-in request failed: {e}")
            raise StoreError("Identity service unavailable") from e

        if response.status_code == 200:
            return response.json()["localId"]

        code = ""
        if response.status_code == 400:
            code = response.json().get("error", {}).get("message", "")
            # Codes may carry a detail suffix, e.g. "TOO_MANY_ATTEMPTS_TRY_LATER : ..."
            code = code.split(" ", 1)[0]
            if code in _CREDENTIAL_ERRORS:
                raise AuthenticationError("Invalid credentials")

        logger.error(f"Password sign-in returned {response.status_code} {code}")
        raise StoreError("Identity service unavailable")

    async def _post(self, url: str, **kwargs) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(url, **kwargs)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(url, **kwargs)
