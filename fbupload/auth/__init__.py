"""Authentication for fbupload.

credentials : module
    Credential type and CredentialStore (environment / .env lookup).
login : module
    authenticate(): exchange a Credential for a bearer token.
"""

from .credentials import Credential, CredentialStore
from .login import AUTH_HEADER, authenticate

__all__ = ["AUTH_HEADER", "Credential", "CredentialStore", "authenticate"]
