from sonub.session.credentials import (
    CookieCredentialStore,
    CredentialStore,
    LocalCredentialStore,
    basic_auth,
    create_credential_store,
)
from sonub.session.domain import root_domain

__all__ = [
    "CredentialStore",
    "LocalCredentialStore",
    "CookieCredentialStore",
    "basic_auth",
    "create_credential_store",
    "root_domain",
]
