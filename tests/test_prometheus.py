import unittest
from unittest import mock

import requests

from app_autoscaler.errors import QueryError
from app_autoscaler.metrics.prometheus import PrometheusClient, get_metric_value


def fake_response(body, status_code=200):
    response = mock.MagicMock()
    response.status_code = status_code
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def scalar_body(value, warnings=None):
    body = {'status': 'success', 'data': {'resultType': 'scalar', 'result': [1714564800.123, value]}}
    if warnings is not None:
        body['warnings'] = warnings
    return body


class TestPrometheusMetrics(unittest.TestCase):
    """Tests for reading the scaling metric from Prometheus."""

    def setUp(self):
        self.client = PrometheusClient('http://prometheus:9090/', timeout=5)
        self.session = mock.MagicMock()
        self.client._session = self.session

    def test_scalar_value(self):
        self.session.request.return_value = fake_response(scalar_body('85.5'))

        value = get_metric_value(self.client, 'cpu_usage')

        self.assertEqual(value, 85.5)
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ('GET', 'http://prometheus:9090/api/v1/query'))
        self.assertEqual(kwargs['params']['query'], 'scalar(cpu_usage)')
        self.assertIn('time', kwargs['params'])
        self.assertEqual(kwargs['timeout'], 5)

    def test_metric_expression_used_verbatim(self):
        self.session.request.return_value = fake_response(scalar_body('1'))

        get_metric_value(self.client, 'sum(rate(http_requests_total{job="web"}[5m]))')

        _, kwargs = self.session.request.call_args
        self.assertEqual(kwargs['params']['query'], 'scalar(sum(rate(http_requests_total{job="web"}[5m])))')

    def test_nan_value(self):
        self.session.request.return_value = fake_response(scalar_body('NaN'))

        value = get_metric_value(self.client, 'missing_metric')

        self.assertNotEqual(value, value)

    def test_non_scalar_result(self):
        body = {'status': 'success', 'data': {'resultType': 'vector', 'result': []}}
        self.session.request.return_value = fake_response(body)

        with self.assertRaises(QueryError) as ctx:
            get_metric_value(self.client, 'cpu_usage')
        self.assertIn('not a scalar', str(ctx.exception))

    def test_warnings_are_fatal(self):
        self.session.request.return_value = fake_response(scalar_body('50', warnings=['partial response']))

        with self.assertRaises(QueryError) as ctx:
            get_metric_value(self.client, 'cpu_usage')
        self.assertIn('partial response', str(ctx.exception))

    def test_error_status(self):
        body = {'status': 'error', 'errorType': 'bad_data', 'error': 'parse error'}
        self.session.request.return_value = fake_response(body, status_code=400)

        with self.assertRaises(QueryError) as ctx:
            get_metric_value(self.client, 'cpu_usage{')
        self.assertIn('bad_data', str(ctx.exception))

    def test_non_json_response(self):
        self.session.request.return_value = fake_response(ValueError('no json'), status_code=502)

        with self.assertRaises(QueryError):
            get_metric_value(self.client, 'cpu_usage')

    def test_non_object_body(self):
        self.session.request.return_value = fake_response([1, 2])

        with self.assertRaises(QueryError):
            get_metric_value(self.client, 'cpu_usage')

    def test_non_object_data(self):
        self.session.request.return_value = fake_response({'status': 'success', 'data': [1]})

        with self.assertRaises(QueryError):
            get_metric_value(self.client, 'cpu_usage')

    def test_malformed_scalar(self):
        body = {'status': 'success', 'data': {'resultType': 'scalar', 'result': None}}
        self.session.request.return_value = fake_response(body)

        with self.assertRaises(QueryError):
            get_metric_value(self.client, 'cpu_usage')

    def test_unreachable(self):
        self.session.request.side_effect = requests.exceptions.ConnectionError('refused')

        with self.assertRaises(QueryError) as ctx:
            get_metric_value(self.client, 'cpu_usage')
        self.assertIsInstance(ctx.exception.__cause__, requests.exceptions.ConnectionError)
        self.assertEqual(self.session.request.call_count, 1)


if __name__ == '__main__':
    unittest.main()
