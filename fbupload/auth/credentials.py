from __future__ import annotations

from dataclasses import dataclass, field
import os
import re
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from fbupload.exceptions import CredentialNotFoundError


@dataclass(frozen=True)
class Credential:
    """
    Username/password pair for a FileBrowser login. The password is kept out
    of repr() so a stray print or traceback never shows it.
    """

    username: str
    password: str = field(repr=False)


class CredentialStore:
    """
    Resolves credential identifiers to Credential objects.

    Identifiers map to FB_<ID>_USERNAME / FB_<ID>_PASSWORD environment
    variables (optionally loaded from .env). A store can also be built from
    an explicit mapping of id -> (username, password).
    """

    def __init__(
        self,
        env_prefix: str = "FB_",
        entries: Optional[Mapping[str, tuple[str, str]]] = None,
        load_env_file: bool = True,
    ) -> None:
        """
        :param env_prefix: Prefix used for environment variables.
        :param entries: Explicit credentials; consulted before the environment.
        :param load_env_file: Whether to load a .env file into the environment.
        """
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))
        self.env_prefix = env_prefix
        self._entries = dict(entries or {})

    # --------------------------------------------------------------------- #
    # Helper: environment variable names for an id
    # --------------------------------------------------------------------- #
    def env_keys(self, credential_id: str) -> tuple[str, str]:
        slug = re.sub(r"[^A-Za-z0-9]", "_", credential_id).upper()
        base = f"{self.env_prefix}{slug}"
        return f"{base}_USERNAME", f"{base}_PASSWORD"

    # --------------------------------------------------------------------- #
    # Lookup
    # --------------------------------------------------------------------- #
    def resolve(self, credential_id: str) -> Credential:
        """
        Returns the credential for credential_id.

        Raises CredentialNotFoundError when the id is empty or either half of
        the pair is missing. The message names the variables, never values.
        """
        if not credential_id:
            raise CredentialNotFoundError("no credential id given")

        if credential_id in self._entries:
            username, password = self._entries[credential_id]
            return Credential(username=username, password=password)

        user_key, pass_key = self.env_keys(credential_id)
        username = os.getenv(user_key)
        password = os.getenv(pass_key)
        if not username or password is None:
            raise CredentialNotFoundError(
                f"credential {credential_id!r} not found "
                f"(expected {user_key} and {pass_key})"
            )
        return Credential(username=username, password=password)
