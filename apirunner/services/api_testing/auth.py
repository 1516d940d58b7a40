"""Credential application for bearer, basic and API-key auth."""

import base64
from typing import Any

from apirunner.errors import AuthConfigurationError
from apirunner.schemas.api_request import AuthConfig


class BasicAuthApplier:
    """
    Applies simple auth schemes to request headers and params.

    Supported types: none, bearer, basic, apikey (header or query). Signature
    based schemes (oauth2, aws-sigv4, digest, custom) need a dedicated
    applier and raise AuthConfigurationError here.
    """

    def apply(
        self,
        auth: AuthConfig,
        method: str,
        url: str,
        headers: dict[str, str],
        params: dict[str, str],
        body: Any = None,
    ) -> None:
        auth_type = auth.type

        if auth_type == "none":
            return

        if auth_type == "bearer":
            if not auth.token:
                raise AuthConfigurationError("Bearer auth requires a token", auth_type=auth_type)
            headers["Authorization"] = f"Bearer {auth.token}"

        elif auth_type == "basic":
            if not auth.username or auth.password is None:
                raise AuthConfigurationError(
                    "Basic auth requires a username and password", auth_type=auth_type
                )
            credentials = base64.b64encode(f"{auth.username}:{auth.password}".encode()).decode()
            headers["Authorization"] = f"Basic {credentials}"

        elif auth_type == "apikey":
            if not auth.api_key:
                raise AuthConfigurationError("API key auth requires apiKey", auth_type=auth_type)
            if auth.api_key_location == "query":
                params[auth.api_key_name] = auth.api_key
            else:
                headers[auth.api_key_name] = auth.api_key

        else:
            raise AuthConfigurationError(
                f"Unsupported authentication type: {auth_type}", auth_type=auth_type
            )
