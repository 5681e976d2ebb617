"""Find the API token for the current invocation.

Lookup order: BB_TOKEN / BITBUCKET_TOKEN in the environment, then the
system keyring entry of the active user recorded in hosts.yml. Stored
values may be a raw token, an OAuth JSON document with ``access_token``,
or ``basic:<user>:<app-password>`` for HTTP Basic auth.
"""

import json
import logging
from typing import Literal

import keyring
from keyring.errors import KeyringError
from pydantic import BaseModel, ConfigDict, Field

from bbcli.config import DEFAULT_HOST, EnvSettings, HostsConfig
from bbcli.errors import CredentialStoreUnavailableError, NotLoggedInError

logger = logging.getLogger(__name__)

KEYRING_SERVICE_NAME = "bb:bitbucket-cli"
BASIC_PREFIX = "basic:"


class Credential(BaseModel):
    """Token held in memory for the lifetime of the process."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(repr=False)
    source: Literal["env", "store"]
    # Set for Basic auth; None means Bearer
    username: str | None = None


def unwrap_token(raw: str) -> str:
    """Return the ``access_token`` of an OAuth JSON envelope, else raw itself."""
    raw = raw.strip()
    try:
        data = json.loads(raw)
    except ValueError:
        return raw
    if isinstance(data, dict):
        token = data.get("access_token")
        if isinstance(token, str) and token:
            return token
    return raw


def _credential_from(raw: str, source: Literal["env", "store"]) -> Credential:
    token = unwrap_token(raw)
    if token.startswith(BASIC_PREFIX):
        user, sep, secret = token[len(BASIC_PREFIX) :].partition(":")
        if sep and user and secret:
            return Credential(token=secret, source=source, username=user)
    return Credential(token=token, source=source)


def keyring_key(host: str, user: str) -> str:
    return f"{host}:{user}"


def resolve_credential(
    settings: EnvSettings,
    hosts: HostsConfig,
    host: str = DEFAULT_HOST,
) -> Credential:
    """Resolve the credential for host.

    Raises:
        NotLoggedInError: no token in the environment and none stored.
        CredentialStoreUnavailableError: keyring backend failed.
    """
    raw = settings.token
    if raw:
        logger.debug("Using token from environment")
        return _credential_from(raw, "env")

    user = hosts.active_user(host)
    if not user:
        raise NotLoggedInError(f"not logged in to {host}")

    try:
        stored = keyring.get_password(KEYRING_SERVICE_NAME, keyring_key(host, user))
    except KeyringError as e:
        raise CredentialStoreUnavailableError(f"could not read credential store: {e}") from e
    if not stored:
        raise NotLoggedInError(f"no token stored for {user} on {host}")
    logger.debug("Using token for %s from keyring", user)
    return _credential_from(stored, "store")
