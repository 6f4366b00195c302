import logging

import requests

from app_autoscaler.common.http_client import JsonApiClient


class DigitalOceanAPIError(Exception):
    """The DigitalOcean API answered with an error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code


class DigitalOceanWrapper(JsonApiClient):
    """
    Wrapper for the DigitalOcean App Platform API authenticated with a personal access token
    """

    def __init__(self, api_token: str, base_url: str, timeout: float = 30.0, tries: int = 1):
        super().__init__(base_url, timeout=timeout, tries=tries,
                         headers={'Authorization': f"Bearer {api_token}"})

    def get_app(self, app_id: str) -> dict:
        """
        Retrieve an app, including its full spec.

        Args:
            app_id: App Platform app ID

        Returns:
            dict: The 'app' object of the API response

        Raises:
            requests.exceptions.RequestException: If the API could not be reached
            DigitalOceanAPIError: If the API rejected the request
        """
        logging.debug(f"Getting app {app_id}")
        response = self.request('GET', f"/v2/apps/{app_id}")
        return self._unwrap_app(response)

    def update_app(self, app_id: str, spec: dict) -> dict:
        """
        Replace an app's spec.

        The API has no partial update, so the spec must be complete.

        Args:
            app_id: App Platform app ID
            spec: Complete app spec

        Returns:
            dict: The updated 'app' object

        Raises:
            requests.exceptions.RequestException: If the API could not be reached
            DigitalOceanAPIError: If the API rejected the request
        """
        logging.debug(f"Updating app {app_id}")
        response = self.request('PUT', f"/v2/apps/{app_id}", json={'spec': spec})
        return self._unwrap_app(response)

    @staticmethod
    def _unwrap_app(response: requests.Response) -> dict:
        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            message = body.get('message') if isinstance(body, dict) else None
            raise DigitalOceanAPIError(response.status_code, message or response.reason or 'request failed')

        if not isinstance(body, dict) or not isinstance(body.get('app'), dict):
            raise DigitalOceanAPIError(response.status_code, "response does not contain an app")

        return body['app']
