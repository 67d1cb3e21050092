"""
Request functions for the store's REST surface.

Every function takes the shared httpx.AsyncClient and an immutable
ClientSettings; no auth state lives on the client object. Successful
responses are unwrapped from the {"data": ...} envelope, failures are
raised as TransportError.
"""

from typing import Any, Optional

import httpx

from common.constants import AUTH_SCHEME
from common.logging_config import get_logger
from shock.exceptions import TransportError
from shock.settings import ClientSettings

logger = get_logger(__name__)

Files = dict[str, tuple]


def auth_headers(settings: ClientSettings) -> dict:
    """
    Build the Authorization header for a request.

    Returns:
        {'Authorization': 'OAuth <token>'} when a token is set, else {}
    """
    if settings.token:
        return {'Authorization': f'{AUTH_SCHEME} {settings.token}'}
    return {}


def _error_detail(response: httpx.Response) -> str:
    """Pull a readable message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase or 'Unknown error'

    if isinstance(body, dict):
        error = body.get('error')
        if isinstance(error, list) and error:
            return str(error[0])
        if error:
            return str(error)
    return response.reason_phrase or 'Unknown error'


async def _send(
    http: httpx.AsyncClient,
    method: str,
    url: str,
    settings: ClientSettings,
    files: Optional[Files] = None,
    data: Optional[dict] = None,
) -> httpx.Response:
    logger.debug(f"Making request: {method} {url}")
    try:
        response = await http.request(
            method,
            url,
            headers=auth_headers(settings),
            files=files,
            data=data,
            timeout=settings.timeout,
        )
    except httpx.HTTPError as e:
        logger.warning(f"Network error: {method} {url} error={type(e).__name__}")
        raise TransportError(str(e) or type(e).__name__, method=method, url=url) from e

    logger.debug(f"Response received: {method} {url} status={response.status_code}")

    if not response.is_success:
        detail = _error_detail(response)
        logger.warning(f"Request failed: {method} {url} status={response.status_code} detail={detail}")
        raise TransportError(detail, method=method, url=url, status_code=response.status_code)

    return response


def _unwrap(response: httpx.Response, method: str, url: str) -> Any:
    try:
        body = response.json()
    except ValueError as e:
        raise TransportError(
            f"Invalid JSON in response: {e}", method=method, url=url, status_code=response.status_code
        ) from e

    if not isinstance(body, dict) or 'data' not in body:
        raise TransportError(
            "Response is missing the data envelope", method=method, url=url, status_code=response.status_code
        )
    return body['data']


async def get_request(http: httpx.AsyncClient, url: str, settings: ClientSettings) -> Any:
    """Authenticated GET; returns the envelope's data."""
    response = await _send(http, 'GET', url, settings)
    return _unwrap(response, 'GET', url)


async def put_request(
    http: httpx.AsyncClient,
    url: str,
    settings: ClientSettings,
    files: Optional[Files] = None,
    data: Optional[dict] = None,
) -> Any:
    """Authenticated multipart PUT; returns the envelope's data."""
    response = await _send(http, 'PUT', url, settings, files=files, data=data)
    return _unwrap(response, 'PUT', url)


async def post_request(
    http: httpx.AsyncClient,
    url: str,
    settings: ClientSettings,
    files: Optional[Files] = None,
    data: Optional[dict] = None,
) -> Any:
    """Authenticated multipart POST; returns the envelope's data."""
    response = await _send(http, 'POST', url, settings, files=files, data=data)
    return _unwrap(response, 'POST', url)


async def delete_request(http: httpx.AsyncClient, url: str, settings: ClientSettings) -> None:
    """Authenticated DELETE; the response body is ignored."""
    await _send(http, 'DELETE', url, settings)
