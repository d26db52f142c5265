"""HTTP transport for shipping snapshots to a collector."""

import gzip
import json
import logging
import time
from typing import Dict, Any, Optional

import requests

from . import __version__
from .config import AgentConfig

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Base exception for transport errors."""
    pass


class AuthenticationError(TransportError):
    """Authentication failed (401/403)."""
    pass


class ValidationError(TransportError):
    """Request validation failed (422)."""
    pass


class SnapshotClient:
    """HTTP client that posts snapshots to a collector endpoint."""

    def __init__(self, url: str, config: AgentConfig):
        self.url = url
        self.config = config

    def _prepare_request(
        self,
        data: Dict[str, Any],
        compress: bool = True,
    ) -> tuple[Dict[str, str], bytes]:
        """
        Serialize the payload and build request headers.

        Args:
            data: Request payload
            compress: Whether to gzip compress the body

        Returns:
            Tuple of (headers, body)
        """
        headers = {
            "Content-Type": "application/json",
            "User-Agent": f"netinfo-agent/{__version__}",
        }

        body = json.dumps(data).encode("utf-8")

        if compress:
            body = gzip.compress(body)
            headers["Content-Encoding"] = "gzip"

        return headers, body

    def _execute_request(
        self,
        method: str,
        headers: Dict[str, str],
        body: Optional[bytes] = None,
    ) -> Dict[str, Any]:
        """
        Execute HTTP request with retry logic.

        Raises:
            TransportError: On request failure
        """
        last_error = None

        for attempt in range(self.config.retry_attempts):
            try:
                response = requests.request(
                    method=method,
                    url=self.url,
                    headers=headers,
                    data=body,
                    timeout=self.config.timeout,
                )

                if 200 <= response.status_code < 300:
                    return response.json() if response.content else {}

                elif response.status_code in (401, 403):
                    raise AuthenticationError(f"Authentication failed: {response.text}")

                elif response.status_code == 422:
                    raise ValidationError(f"Validation failed: {response.text}")

                elif response.status_code >= 500:
                    last_error = TransportError(f"Server error: {response.status_code}")

                else:
                    raise TransportError(f"Request failed: {response.status_code} - {response.text}")

            except requests.exceptions.Timeout:
                last_error = TransportError("Request timeout")

            except requests.exceptions.ConnectionError:
                last_error = TransportError("Connection error")

            except requests.exceptions.RequestException as e:
                raise TransportError(f"Request failed: {e}") from e

            logger.warning(f"Attempt {attempt + 1}/{self.config.retry_attempts} failed: {last_error}")
            if attempt + 1 < self.config.retry_attempts:
                time.sleep(self.config.retry_backoff ** attempt)

        # All retries exhausted
        raise last_error or TransportError("Request failed after all retries")

    def send(self, payload: Dict[str, Any], compress: bool = True) -> Dict[str, Any]:
        """
        Send a snapshot payload to the collector.

        Raises:
            TransportError: On delivery failure
        """
        headers, body = self._prepare_request(payload, compress=compress)
        return self._execute_request("POST", headers, body)
