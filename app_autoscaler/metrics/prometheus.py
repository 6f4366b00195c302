import logging
import time

import requests

from app_autoscaler.common.http_client import JsonApiClient
from app_autoscaler.errors import QueryError

SCALAR_RESULT = 'scalar'


class PrometheusClient(JsonApiClient):
    """
    Client for the Prometheus instant query HTTP API.
    """

    def query(self, expression: str, at: float = None) -> dict:
        """
        Run an instant query and return the decoded response body.

        Args:
            expression: PromQL expression
            at: Evaluation timestamp (Unix time), defaults to now

        Returns:
            dict: Response body with 'status', 'data' and optional 'warnings'

        Raises:
            QueryError: If Prometheus is unreachable or rejects the query
        """
        params = {'query': expression, 'time': at if at is not None else time.time()}
        try:
            response = self.request('GET', '/api/v1/query', params=params)
        except requests.exceptions.RequestException as e:
            raise QueryError(f"Error querying Prometheus at {self.base_url}: {e}") from e

        try:
            body = response.json()
        except ValueError:
            raise QueryError(f"Prometheus returned a non-JSON response "
                             f"(HTTP {response.status_code})") from None

        if not isinstance(body, dict):
            raise QueryError(f"Prometheus returned an unexpected response body "
                             f"(HTTP {response.status_code}): {body!r}")

        if body.get('status') != 'success':
            raise QueryError(f"Prometheus query failed (HTTP {response.status_code}): "
                             f"[{body.get('errorType', 'unknown')}] {body.get('error', 'no error message')}")

        return body


def get_metric_value(prometheus_client: PrometheusClient, metric_name: str) -> float:
    """
    Get the current value of a metric as a Prometheus scalar.

    The metric name is used verbatim inside a scalar() expression, so it may
    itself be any PromQL expression yielding a single-element vector.

    Args:
        prometheus_client: Prometheus API client
        metric_name: Metric name or PromQL expression

    Returns:
        float: The scalar value (NaN when the expression matched no single series)

    Raises:
        QueryError: If the query fails, returns warnings or is not a scalar
    """
    expression = f"scalar({metric_name})"
    body = prometheus_client.query(expression)

    # Results that come with warnings are never acted on
    warnings = body.get('warnings') or []
    if warnings:
        raise QueryError(f"Prometheus returned warnings for {expression}: {'; '.join(map(str, warnings))}")

    data = body.get('data') or {}
    if not isinstance(data, dict):
        raise QueryError(f"Unreadable query data for {expression}: {data!r}")

    result_type = data.get('resultType')
    if result_type != SCALAR_RESULT:
        raise QueryError(f"Result is not a scalar value (got {result_type!r})")

    # Scalar results are encoded as [<unix time>, "<value>"]
    try:
        _, raw_value = data['result']
        value = float(raw_value)
    except (KeyError, TypeError, ValueError) as e:
        raise QueryError(f"Unreadable scalar result {data.get('result')!r}: {e}") from e

    logging.debug(f"Query {expression} returned {value}")
    return value
