"""Photo search for profile pictures (Pexels).

Searching never fails from the caller's point of view: a missing key, a
transport error, a non-2xx reply or an unexpected body all produce ``[]``
and a log line.
"""

import logging
from typing import Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


def search_photos(
    term: str,
    api_key: Optional[str],
    url: str = 'https://api.pexels.com/v1/search',
    page_size: int = 15,
    timeout: float = 10.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> List[Dict]:
    if not api_key:
        logger.error("[image-search] PEXELS_API_KEY is missing; returning no results")
        return []
    if not isinstance(term, str) or not term.strip():
        return []
    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            response = client.get(
                url,
                headers={'Authorization': api_key},
                params={'query': term.strip(), 'per_page': page_size},
            )
            response.raise_for_status()
            photos = response.json().get('photos') or []
            return [{'id': p['id'], 'url': p['src']['medium']} for p in photos][:page_size]
    except httpx.HTTPStatusError as exc:
        logger.error(f"[image-search] provider returned {exc.response.status_code}: {exc.response.text[:200]}")
    except httpx.RequestError as exc:
        logger.error(f"[image-search] request failed: {exc}")
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.error(f"[image-search] unexpected response body: {exc}")
    return []
