import logging
import sys
import time
from typing import Any, Dict, Mapping, NamedTuple, Optional

from app_autoscaler.common.logger import setup_logging
from app_autoscaler.config import Config, load_config
from app_autoscaler.digitalocean.apps import get_current_app_size, set_app_size
from app_autoscaler.digitalocean.wrapper import DigitalOceanWrapper
from app_autoscaler.errors import AutoscalerError
from app_autoscaler.metrics.prometheus import PrometheusClient, get_metric_value
from app_autoscaler.scaler import NO_ACTION, SCALE_UP, decide_scaling_action
from app_autoscaler.state.status import ScalingState
from app_autoscaler.status_server import StatusServer

POLL_INTERVAL_SECONDS = 60


class AutoscalerContext(NamedTuple):
    """Everything a scaling check needs, built once at startup."""
    config: Config
    prometheus: PrometheusClient
    digitalocean: DigitalOceanWrapper
    state: ScalingState


def build_context(config: Config, state: ScalingState = None) -> AutoscalerContext:
    """Create the API clients for a validated configuration."""
    prometheus = PrometheusClient(
        config.prometheus_host,
        timeout=config.request_timeout,
        tries=config.api_retries
    )
    digitalocean = DigitalOceanWrapper(
        config.do_api_token,
        config.do_api_url,
        timeout=config.request_timeout,
        tries=config.api_retries
    )
    return AutoscalerContext(
        config=config,
        prometheus=prometheus,
        digitalocean=digitalocean,
        state=state or ScalingState()
    )


def run_scaling_check(context: AutoscalerContext) -> Dict[str, Any]:
    """
    Run one polling iteration: read the metric and the app size, then step the size if needed.

    Args:
        context: Autoscaler context

    Returns:
        dict: Metric value, current size and the size that was requested

    Raises:
        QueryError: If the metric cannot be read
        FetchError: If the app cannot be read
        UpdateError: If the app cannot be updated
    """
    config = context.config

    current_value = get_metric_value(context.prometheus, config.prometheus_metric)
    logging.info(f"Current value: {current_value:f}")

    current_size = get_current_app_size(context.digitalocean, config.do_app_id, context.state)

    action = decide_scaling_action(
        current_value,
        config.threshold_up,
        config.threshold_down,
        current_size,
        config.max_size
    )

    new_size = current_size + action
    if action != NO_ACTION:
        logging.info(f"Scaling {'up' if action == SCALE_UP else 'down'} from {current_size} to {new_size} instances")
        set_app_size(context.digitalocean, config.do_app_id, new_size)

    return {
        'metric_value': current_value,
        'current_size': current_size,
        'new_size': new_size
    }


def run_forever(context: AutoscalerContext, interval: float = POLL_INTERVAL_SECONDS, sleep=time.sleep):
    """Poll until an error escapes a scaling check."""
    while True:
        run_scaling_check(context)

        logging.info(f"Sleeping for {interval} seconds")
        sleep(interval)


def main(env: Optional[Mapping[str, str]] = None):
    """
    Start the status server and the scaling loop.

    Only returns by exiting the process: any autoscaler error is logged and
    ends the process with status 1.
    """
    setup_logging()

    try:
        config = load_config(env)
        context = build_context(config)
        StatusServer(context.state, config.bind_port).start()

        logging.info(f"Autoscaling app {config.do_app_id} on {config.prometheus_metric} "
                     f"(up > {config.threshold_up}, down < {config.threshold_down}, max {config.max_size})")
        run_forever(context)
    except AutoscalerError as e:
        logging.critical(f"{type(e).__name__}: {e}")
        sys.exit(1)
