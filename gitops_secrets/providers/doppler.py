"""
Doppler provider — download a config's secrets from the Doppler API.

Authenticates with a service token (DOPPLER_TOKEN) over HTTP Basic auth,
token as username and an empty password.

Security Note:
    Never log the token or the downloaded values. Only log status codes
    and the number of secrets fetched.
"""
import base64
import logging
from typing import Any, Optional

import aiohttp

from ..conf import DOPPLER_API_URL, DOPPLER_TIMEOUT, DOPPLER_TOKEN_ENV, get_env
from ..exceptions import ProviderError
from ..version import __version__

logger = logging.getLogger("gitops_secrets.providers")

PROVIDER = "Doppler"
USER_AGENT = f"gitops-secrets-python/{__version__}"


def _error_message(body: Any, status: int) -> str:
    if isinstance(body, dict):
        messages = body.get("messages")
        if isinstance(messages, list) and messages:
            return " ".join(str(m) for m in messages)
    return f"HTTP {status}"


def _basic_auth(token: str) -> str:
    credentials = base64.b64encode(f"{token}:".encode("utf-8")).decode("ascii")
    return f"Basic {credentials}"


async def _download(session: aiohttp.ClientSession, token: str) -> dict[str, Any]:
    async with session.get(
        DOPPLER_API_URL,
        params={"format": "json"},
        headers={
            "Authorization": _basic_auth(token),
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        },
    ) as response:
        try:
            body = await response.json(content_type=None)
        except ValueError:
            body = None
        if response.status != 200:
            logger.error("Doppler API responded with HTTP %d", response.status)
            raise ProviderError(
                PROVIDER, _error_message(body, response.status), status=response.status,
            )
        if not isinstance(body, dict):
            raise ProviderError(PROVIDER, "response is not a JSON object", status=response.status)
        return body


async def fetch(
    token: Optional[str] = None,
    *,
    session: Optional[aiohttp.ClientSession] = None,
) -> dict[str, Any]:
    """Fetch all secrets of the config bound to a Doppler service token.

    Args:
        token: Service token; defaults to the DOPPLER_TOKEN env var.
        session: Optional client session to reuse; one is created otherwise.

    Returns:
        Mapping of secret name to value.

    Raises:
        ProviderError: If no token is configured, the API rejects the
            request, or the request fails in transit.
    """
    token = token or get_env(DOPPLER_TOKEN_ENV)
    if not token:
        raise ProviderError(PROVIDER, f"{DOPPLER_TOKEN_ENV} environment variable is not set")

    try:
        if session is not None:
            secrets = await _download(session, token)
        else:
            timeout = aiohttp.ClientTimeout(total=DOPPLER_TIMEOUT)
            async with aiohttp.ClientSession(timeout=timeout) as client:
                secrets = await _download(client, token)
    except aiohttp.ClientError as err:
        raise ProviderError(PROVIDER, str(err) or type(err).__name__) from err

    logger.info("Fetched %d secret(s) from Doppler", len(secrets))
    return secrets
