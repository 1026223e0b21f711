"""IAM authenticator construction.

The only module that builds an ``ibm_cloud_sdk_core`` authenticator;
every SDK client in :mod:`pvsadm.infra` shares the one built here.
"""

from __future__ import annotations

from typing import Any

from pvsadm.exceptions import AuthenticationError, missing_sdk_error


def build_authenticator(api_key: str) -> Any:
    """Return an ``IAMAuthenticator`` for *api_key*.

    Raises
    ------
    AuthenticationError
        When the SDK rejects the key (empty or malformed).
    EnvironmentCheckError
        When ``ibm-cloud-sdk-core`` is not installed.
    """
    try:
        from ibm_cloud_sdk_core.authenticators import IAMAuthenticator
    except ModuleNotFoundError as exc:
        raise missing_sdk_error("ibm-cloud-sdk-core") from exc

    try:
        return IAMAuthenticator(api_key)
    except ValueError as exc:
        raise AuthenticationError(
            f"Invalid IBM Cloud API key: {exc}",
            hint="Create a key with: ibmcloud iam api-key-create pvsadm",
        ) from exc
