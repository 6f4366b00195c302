"""
Autoscaler for DigitalOcean App Platform services based on a Prometheus metric.

This package polls a single scalar metric and steps the instance count of an
app's first service up or down by one, within configured bounds.
"""

__version__ = "0.1.0"
