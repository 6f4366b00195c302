import logging
from typing import Dict

import requests
from retry.api import retry_call

RETRY_DELAY = 3
USER_AGENT = 'do-app-autoscaler'

# Only transport failures are worth another attempt; HTTP error statuses are final.
RETRYABLE_EXCEPTIONS = (requests.exceptions.ConnectionError, requests.exceptions.Timeout)


class JsonApiClient:
    """
    Base wrapper for JSON HTTP APIs with a shared session, timeout and retry policy
    """

    def __init__(self, base_url: str, timeout: float = 30.0, tries: int = 1,
                 headers: Dict[str, str] = None):
        self._base_url = base_url.rstrip('/')
        self._timeout = timeout
        self._tries = tries
        self._session = self._create_session(headers)

    def _create_session(self, headers: Dict[str, str] = None) -> requests.Session:
        logging.debug(f"Creating HTTP session for: {self._base_url}")
        session = requests.Session()
        session.headers.update({
            'Accept': 'application/json',
            'User-Agent': USER_AGENT
        })
        session.headers.update(headers or {})
        return session

    @property
    def base_url(self) -> str:
        return self._base_url

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Send a request relative to the base URL.

        Transport failures are retried up to the configured number of tries;
        with a single try the first failure is raised immediately.

        Args:
            method: HTTP method
            path: Path appended to the base URL
            **kwargs: Extra arguments passed to requests.Session.request

        Returns:
            requests.Response: The raw response, whatever its status code

        Raises:
            requests.exceptions.RequestException: If no response could be obtained
        """
        url = f"{self._base_url}{path}"
        kwargs.setdefault('timeout', self._timeout)
        logging.debug(f"{method} {url}")
        return retry_call(self._session.request, fargs=[method, url], fkwargs=kwargs,
                          exceptions=RETRYABLE_EXCEPTIONS, tries=self._tries, delay=RETRY_DELAY)
