import copy
import logging
from typing import Any, Dict, List

import requests

from app_autoscaler.digitalocean.wrapper import DigitalOceanAPIError, DigitalOceanWrapper
from app_autoscaler.errors import FetchError, UpdateError
from app_autoscaler.state.status import ScalingState


def _get_app_spec(do_wrapper: DigitalOceanWrapper, app_id: str) -> Dict[str, Any]:
    try:
        app = do_wrapper.get_app(app_id)
    except (requests.exceptions.RequestException, DigitalOceanAPIError) as e:
        raise FetchError(f"Error getting app {app_id}: {e}") from e

    spec = app.get('spec') or {}
    if not isinstance(spec, dict):
        raise FetchError(f"Unreadable spec for app {app_id}: {spec!r}")

    services = spec.get('services') or []
    if not isinstance(services, list):
        raise FetchError(f"Unreadable services for app {app_id}: {services!r}")
    if not services:
        raise FetchError(f"No services found in app {app_id}")
    if not isinstance(services[0], dict):
        raise FetchError(f"Unreadable first service for app {app_id}: {services[0]!r}")

    return spec


def _first_service(spec: Dict[str, Any]) -> Dict[str, Any]:
    # Only the first service is scaled; any others are left as they are
    services: List[Dict[str, Any]] = spec['services']
    return services[0]


def get_current_app_size(do_wrapper: DigitalOceanWrapper, app_id: str, scaling_state: ScalingState) -> int:
    """
    Get the instance count of the app's first service.

    A successful read is recorded in the scaling state.

    Args:
        do_wrapper: DigitalOcean API wrapper instance
        app_id: App Platform app ID
        scaling_state: Shared state published by the status endpoint

    Returns:
        int: Current instance count

    Raises:
        FetchError: If the app cannot be retrieved or has no services
    """
    logging.info("Getting current app size")

    spec = _get_app_spec(do_wrapper, app_id)
    service = _first_service(spec)
    raw_size = service.get('instance_count') or 0
    try:
        size = int(raw_size)
    except (TypeError, ValueError) as e:
        raise FetchError(f"Unreadable instance count {raw_size!r} for app {app_id}") from e

    logging.info(f"Current app size: {size}")
    scaling_state.record(size)

    return size


def set_app_size(do_wrapper: DigitalOceanWrapper, app_id: str, size: int) -> Dict[str, Any]:
    """
    Set the instance count of the app's first service.

    The current spec is read again and sent back whole, with only the first
    service's instance count changed.

    Args:
        do_wrapper: DigitalOcean API wrapper instance
        app_id: App Platform app ID
        size: New instance count

    Returns:
        dict: The updated app

    Raises:
        FetchError: If the current spec cannot be retrieved
        UpdateError: If the update is rejected or cannot be sent
    """
    logging.info(f"Setting app size to {size}")

    spec = copy.deepcopy(_get_app_spec(do_wrapper, app_id))
    _first_service(spec)['instance_count'] = size

    try:
        app = do_wrapper.update_app(app_id, spec)
    except (requests.exceptions.RequestException, DigitalOceanAPIError) as e:
        raise UpdateError(f"Error updating app {app_id}: {e}") from e

    logging.info(f"Updated app {app_id} to {size} instances")
    return app
