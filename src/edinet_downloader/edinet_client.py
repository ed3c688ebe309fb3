"""
EDINET API v2 client.

Handles communication with the EDINET disclosure system including:
- Daily document list retrieval
- Document archive downloads
- Rate limiting and retries
"""

import logging
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .models import DocumentEntry
from .utils import RateLimiter, get_user_agent, parse_date


logger = logging.getLogger(__name__)

# type=2 lists documents with metadata; type=1 downloads the XBRL archive
LIST_TYPE_METADATA = 2
DOWNLOAD_TYPE_XBRL = 1


class EdinetError(Exception):
    """Base exception for EDINET API errors."""
    pass


class EdinetClient:
    """
    Client for the EDINET document API.
    """

    BASE_URL = "https://api.edinet-fsa.go.jp/api/v2"

    def __init__(
        self,
        api_key: str,
        timeout_seconds: int = 300,
        requests_per_second: int = 3,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize EDINET client.

        Args:
            api_key: EDINET subscription key
            timeout_seconds: Timeout for every request, including downloads
            requests_per_second: Client-side rate limit
            session: Preconfigured session (a retrying session is built when None)
        """
        if not api_key:
            raise EdinetError("EDINET API key is required")

        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.rate_limiter = RateLimiter(max_requests=requests_per_second)

        if session is None:
            session = requests.Session()

            retry_strategy = Retry(
                total=3,
                backoff_factor=1,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET"]
            )

            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("http://", adapter)
            session.mount("https://", adapter)

        self.session = session
        self.session.headers.update({
            'User-Agent': get_user_agent(),
            'Accept-Encoding': 'gzip, deflate',
        })

        logger.info("Initialized EDINET client")

    def _make_request(
        self,
        url: str,
        params: dict,
        allowed_status: Optional[Sequence[int]] = None,
        **kwargs
    ) -> requests.Response:
        """
        Make rate-limited HTTP request.

        Raises:
            EdinetError: If request fails
        """
        self.rate_limiter.wait_if_needed()

        request_params = dict(params)
        request_params["Subscription-Key"] = self.api_key

        try:
            logger.debug(f"Making request to: {url}")
            response = self.session.get(
                url, params=request_params, timeout=self.timeout_seconds, **kwargs
            )

            if allowed_status and response.status_code in allowed_status:
                return response

            response.raise_for_status()
            return response

        except requests.RequestException as e:
            # The subscription key is a query parameter; keep it out of the logs
            logger.error(f"Request failed for {url}: {type(e).__name__}")
            raise EdinetError(f"Failed to fetch {url}: {type(e).__name__}") from e

    def list_documents(self, target_date) -> List[DocumentEntry]:
        """
        List every document submitted on ``target_date``.

        Args:
            target_date: Date or YYYY-MM-DD string

        Returns:
            List of DocumentEntry objects

        Raises:
            EdinetError: If the request fails or the API reports an error
        """
        day: date = parse_date(target_date)
        url = f"{self.BASE_URL}/documents.json"
        response = self._make_request(
            url, {"date": day.isoformat(), "type": LIST_TYPE_METADATA}
        )

        try:
            data = response.json()
        except ValueError as e:
            raise EdinetError(f"Invalid JSON in document list for {day}: {e}") from e

        metadata = data.get("metadata") or {}
        status = str(metadata.get("status", "200"))
        if status != "200":
            raise EdinetError(
                f"EDINET document list for {day} returned status {status}: "
                f"{metadata.get('message', '')}"
            )

        entries = [DocumentEntry.from_api(item) for item in data.get("results") or []]
        logger.info(f"Listed {len(entries)} documents for {day}")
        return entries

    def list_securities_reports(self, target_date) -> List[DocumentEntry]:
        """List only securities reports and amended securities reports."""
        return [entry for entry in self.list_documents(target_date) if entry.is_securities_report]

    def download_document(self, doc_id: str, local_path: Path) -> Path:
        """
        Download the XBRL archive of a document.

        Args:
            doc_id: EDINET document id
            local_path: Destination ZIP path

        Returns:
            Path of the written archive

        Raises:
            EdinetError: If the download fails or the response is not an archive
        """
        url = f"{self.BASE_URL}/documents/{doc_id}"
        logger.info(f"Downloading document {doc_id} to {local_path}")

        response = self._make_request(url, {"type": DOWNLOAD_TYPE_XBRL}, stream=True)

        content_type = response.headers.get("Content-Type", "")
        if "json" in content_type:
            raise EdinetError(f"EDINET returned an error payload for document {doc_id}")

        local_path = Path(local_path)
        local_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(local_path, 'wb') as f:
                for chunk in response.iter_content(chunk_size=8192):
                    if chunk:
                        f.write(chunk)
        except requests.RequestException as e:
            raise EdinetError(f"Download interrupted for document {doc_id}: {e}") from e

        logger.debug(f"Successfully downloaded to {local_path}")
        return local_path
