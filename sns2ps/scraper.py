import cloudscraper
import structlog
from cloudscraper.exceptions import CloudflareException
from requests.exceptions import RequestException

from sns2ps.config import DEFAULT_TIMEOUT
from sns2ps.exceptions import FetchError, FetchErrorKind

logger = structlog.get_logger(__name__)


class Scraper:
    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the Scraper with cloudscraper to get past Cloudflare.

        :param timeout: Seconds to wait for each response.
        """
        self.scraper = cloudscraper.create_scraper()
        self.timeout = timeout

        self.scraper.headers.update({"Accept": "application/json"})

    def get_json(self, url: str, username: str, password: str):
        """
        Perform a single authenticated GET request and decode the JSON body.

        There are no retries: one attempt per call. The credentials are only
        used for this request.

        :param url: Target URL.
        :param username: Basic auth username.
        :param password: Basic auth password.
        :return: The decoded JSON payload.
        :raises FetchError: classified as UNAUTHORIZED, NOT_FOUND or TRANSPORT.
        """
        logger.info("fetching_url", url=url)
        try:
            response = self.scraper.get(
                url, auth=(username, password), timeout=self.timeout
            )
        except (RequestException, CloudflareException) as e:
            logger.warning("request_failed", url=url, error=str(e))
            raise FetchError(f"Request to {url} failed: {e}", url=url) from e

        status = response.status_code
        if status >= 400:
            kind = FetchErrorKind.from_status(status)
            logger.warning(
                "request_rejected", url=url, status_code=status, kind=kind.value
            )
            raise FetchError(
                f"Request to {url} returned HTTP {status}",
                kind=kind,
                url=url,
                status_code=status,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.warning("invalid_json", url=url, status_code=status)
            raise FetchError(
                f"Response from {url} is not valid JSON",
                url=url,
                status_code=status,
            ) from e
