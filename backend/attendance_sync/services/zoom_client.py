import logging
from typing import List, Optional
import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from attendance_sync.core.config import settings
from attendance_sync.core.errors import RemoteError
from attendance_sync.core.result import Ok, Err, Result
from attendance_sync.schemas import AbsenteePage, AbsenteeRecord

logger = logging.getLogger(__name__)

def build_session(max_retries: int, backoff: float) -> requests.Session:
    """HTTP session retrying connection errors and 429/5xx on GET"""
    retry = Retry(
        total=max_retries,
        backoff_factor=backoff,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset(["GET"]),
        raise_on_status=False,
    )
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session

class ZoomClient:
    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.session = session or build_session(settings.ZOOM_MAX_RETRIES, settings.ZOOM_RETRY_BACKOFF)
        self.timeout = timeout if timeout is not None else settings.ZOOM_HTTP_TIMEOUT_SECONDS

    def _get_absentee_page(self, base_url: str, webinar_id: str, token: str, page: int) -> AbsenteePage:
        url = f"{base_url.rstrip('/')}/past_webinars/{webinar_id}/absentees"
        headers = {
            "Content-Type": "application/json;charset=UTF-8",
            "Authorization": f"Bearer {token}",
        }
        try:
            response = self.session.get(url, headers=headers, params={"page": page}, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise RemoteError(f"Failed to reach Zoom for webinar {webinar_id}: {e}") from e

        if not response.ok:
            raise RemoteError(
                f"Zoom returned {response.status_code} for absentees of webinar {webinar_id} (page {page})"
            )

        try:
            return AbsenteePage.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise RemoteError(f"Malformed absentees response for webinar {webinar_id}: {e}") from e

    def fetch_all_absentees(self, base_url: str, webinar_id: str, token: str) -> Result:
        """
        Fetch every absentee of a past webinar.
        The page count is taken from the first response only.
        Returns Ok(list of AbsenteeRecord) or Err(RemoteError).
        """
        absentees: List[AbsenteeRecord] = []
        try:
            first = self._get_absentee_page(base_url, webinar_id, token, 0)
            page_count = first.page_count
            absentees.extend(first.registrants)
            logger.info(f"Webinar {webinar_id}: {page_count} absentee page(s)")

            page = 1
            while page < page_count:
                current = self._get_absentee_page(base_url, webinar_id, token, page)
                absentees.extend(current.registrants)
                page += 1
        except RemoteError as e:
            logger.error(f"❌ Absentee fetch failed: {e.message}")
            return Err(e)

        logger.info(f"Webinar {webinar_id}: fetched {len(absentees)} absentee(s)")
        return Ok(absentees)
