"""Boundary to the remote analysis service (single POST request/response)."""

import asyncio
import json

from config import ANALYZER_DEBUG, API_URL, REQUEST_TIMEOUT_S
from errors import SchemaError, ServiceError


async def post_analysis(source: str, api_url: str = API_URL, fetch=None, timeout=None) -> dict:
    """
    Posts the source buffer to the analysis service and returns the decoded
    payload, untouched. `fetch` defaults to Pyodide's pyfetch.

    Raises:
        ServiceError: transport failure, timeout or non-2xx status.
        SchemaError: the body is not a JSON object.
    """
    if fetch is None:
        from pyodide.http import pyfetch
        fetch = pyfetch
    if timeout is None:
        timeout = REQUEST_TIMEOUT_S

    try:
        request = fetch(
            api_url,
            method="POST",
            headers={"Content-Type": "application/json"},
            body=json.dumps({"code": source}),
        )
        if timeout:
            response = await asyncio.wait_for(request, timeout)
        else:
            response = await request
    except asyncio.TimeoutError as e:
        raise ServiceError(f"Request to {api_url} timed out after {timeout}s") from e
    except Exception as e:
        raise ServiceError(f"Request to {api_url} failed: {e}") from e

    if not response.ok:
        raise ServiceError(f"Error HTTP: {response.status}", status=response.status)

    try:
        body = await response.string()
        payload = json.loads(body)
    except ValueError as e:
        raise SchemaError("payload") from e
    except Exception as e:
        raise ServiceError(f"Failed reading response from {api_url}: {e}", status=response.status) from e

    if not isinstance(payload, dict):
        raise SchemaError("payload")

    if ANALYZER_DEBUG:
        print(f"[Service] {api_url} -> HTTP {response.status}, keys={sorted(payload)}")
    return payload
