import logging
from typing import Any, Dict, Optional

import httpx

from typespeed.errors import TransportError
from typespeed.services.game.scoring import ScoreRecord

logger = logging.getLogger(__name__)


class ScoreClient:
    """HTTP client for the score service's save and retrieve endpoints."""

    def __init__(self, base_url: str, timeout: float = 5.0, transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip('/')
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise TransportError(f'{method} {path} returned {exc.response.status_code}') from exc
        except httpx.HTTPError as exc:
            raise TransportError(f'{method} {path} failed: {exc}') from exc
        except ValueError as exc:
            raise TransportError(f'{method} {path} returned invalid JSON') from exc
        if not isinstance(payload, dict) or not payload.get('success'):
            message = payload.get('message') if isinstance(payload, dict) else None
            raise TransportError(f'{method} {path} was rejected: {message}')
        return payload

    def submit(self, record: ScoreRecord) -> Optional[int]:
        """Save one record remotely and return the id the server assigned."""
        payload = self._request('POST', '/api/save_score', json={
            'level': record.level,
            'score': record.score,
            'total': record.total,
            'percentage': record.percentage,
        })
        logger.debug(f"[remote] saved score id={payload.get('id')}")
        return payload.get('id')

    def fetch(self, level: Optional[str] = None, limit: Optional[int] = None,
              include_statistics: bool = False) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if level:
            params['level'] = level
        if limit is not None:
            params['limit'] = limit
        if include_statistics:
            params['includeStatistics'] = 'true'
        return self._request('GET', '/api/get_scores', params=params)
