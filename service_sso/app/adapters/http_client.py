"""
Generic HTTP collaborators used by the provider components.

``request_json`` performs a prepared request and decodes its JSON body,
``validate_token`` probes a validation endpoint with an access token.
"""

from functools import lru_cache
from typing import Any, Dict, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from shared.errors import DecodeError, RemoteUnavailableError, RequestCancelledError
from shared.logging import get_logger

logger = get_logger("sso.http_client")

DEFAULT_TIMEOUT = 10.0


def bearer_headers(access_token: str) -> Dict[str, str]:
    """Headers sent with every authenticated call to the SSO realm."""
    return {
        "Accept": "application/json",
        "Authorization": f"Bearer {access_token}",
    }


@lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


async def request_json(request: httpx.Request, target: Any, *,
                       service: str = "sso",
                       timeout: Optional[float] = DEFAULT_TIMEOUT,
                       transport: Optional[httpx.AsyncBaseTransport] = None) -> Any:
    """Send ``request`` and decode a 200 JSON body into ``target``.

    ``target`` is anything pydantic can validate against: a model class or a
    typing construct such as ``List[GroupInfo]``.

    Raises:
        RequestCancelledError: the timeout elapsed before a response arrived.
        RemoteUnavailableError: transport failure or non-200 status.
        DecodeError: the body is not JSON or does not match ``target``.
    """
    url = str(request.url)
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.send(request)
    except httpx.TimeoutException as e:
        logger.warning("Request timed out", service=service, url=url, error=str(e))
        raise RequestCancelledError(
            f"{service}: request to {url} timed out",
            details={"url": url}
        ) from e
    except httpx.HTTPError as e:
        logger.error("HTTP transport error", service=service, url=url, error=str(e))
        raise RemoteUnavailableError(
            service,
            str(e) or type(e).__name__,
            details={"url": url}
        ) from e

    logger.debug("GET", service=service, url=url, status_code=response.status_code)

    if response.status_code != 200:
        raise RemoteUnavailableError(
            service,
            f"got {response.status_code} {response.text}",
            details={"url": url, "status_code": response.status_code}
        )

    try:
        return _adapter(target).validate_python(response.json())
    except (ValueError, ValidationError) as e:
        logger.error("Malformed response body", service=service, url=url, error=str(e))
        raise DecodeError(
            service,
            f"error unmarshalling response from {url}",
            details={"url": url, "error": str(e)}
        ) from e


async def validate_token(validate_url: Optional[str], access_token: str,
                         headers: Optional[Dict[str, str]] = None, *,
                         timeout: Optional[float] = DEFAULT_TIMEOUT,
                         transport: Optional[httpx.AsyncBaseTransport] = None) -> bool:
    """Return True when ``validate_url`` answers 200 for ``access_token``.

    Without headers the token travels in the ``access_token`` query
    parameter. Transport errors and non-200 answers count as invalid; an
    elapsed timeout raises ``RequestCancelledError``.
    """
    if not access_token or not validate_url:
        return False

    url = httpx.URL(validate_url)
    if not headers:
        url = url.copy_merge_params({"access_token": access_token})
    request = httpx.Request("GET", url, headers=headers)
    # query string may carry the token; never log the full URL
    endpoint = str(request.url.copy_with(query=None))

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.send(request)
    except httpx.TimeoutException as e:
        logger.warning("Token validation timed out", url=endpoint)
        raise RequestCancelledError(
            f"token validation against {endpoint} timed out",
            details={"url": endpoint}
        ) from e
    except httpx.HTTPError as e:
        logger.error("Token validation request failed", url=endpoint, error=str(e))
        return False

    if response.status_code == 200:
        return True

    logger.warning(
        "Token validation request failed",
        url=endpoint,
        status_code=response.status_code,
        body=response.text
    )
    return False
