"""HTTP client creation factory.

This module provides a centralized way to create the httpx client used by the
provider gateways so API keys, base URLs, and timeouts are configured in one place.
"""

import os
from typing import Any, Optional

import httpx
from loguru import logger

SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"


def create_http_client(
    base_url: str,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
    max_retries: int = 2,
    **kwargs: Any,
) -> httpx.Client:
    """Create and configure an httpx client for the authoring API.

    Args:
        base_url: The authoring API base URL.
        api_key: The programmatic key. If None, tries the LUIS_PROGRAMMATIC_KEY env var.
        timeout: Request timeout in seconds.
        max_retries: Connection retries handled by the transport.
        **kwargs: Additional arguments to pass to the httpx.Client constructor.

    Returns:
        Configured httpx client.
    """
    final_api_key = api_key or os.getenv("LUIS_PROGRAMMATIC_KEY")

    # Log configuration (masking key)
    masked_key = (
        f"{final_api_key[:4]}...{final_api_key[-4:]}" if final_api_key and len(final_api_key) > 8 else "None"
    )
    logger.debug(
        f"Creating HTTP client: base_url={base_url}, "
        f"api_key={masked_key}, timeout={timeout}"
    )

    headers = dict(kwargs.pop("headers", None) or {})
    if final_api_key:
        headers[SUBSCRIPTION_KEY_HEADER] = final_api_key

    if "transport" not in kwargs:
        kwargs["transport"] = httpx.HTTPTransport(retries=max_retries)

    return httpx.Client(
        base_url=base_url,
        headers=headers,
        timeout=timeout,
        **kwargs,
    )
