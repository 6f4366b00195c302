import logging

MIN_SIZE = 1

SCALE_UP = 1
NO_ACTION = 0
SCALE_DOWN = -1


def decide_scaling_action(
        current_value,
        threshold_up,
        threshold_down,
        current_size,
        max_size
):
    """
    Decide whether to add, remove or keep one instance.

    Thresholds are strict: a value equal to either threshold never scales.
    The result only depends on the arguments.

    Args:
        current_value: Latest metric value
        threshold_up: Scale out when the value is above this
        threshold_down: Scale in when the value is below this
        current_size: Current instance count
        max_size: Upper bound for the instance count

    Returns:
        int: SCALE_UP, SCALE_DOWN or NO_ACTION
    """
    if current_value > threshold_up:
        if current_size >= max_size:
            logging.info(f"Already at maximum size ({current_size}/{max_size})")
            return NO_ACTION
        logging.info(f"Value {current_value} above threshold {threshold_up}, scaling up")
        return SCALE_UP

    if current_value < threshold_down:
        if current_size <= MIN_SIZE:
            logging.info(f"Already at minimum size ({current_size})")
            return NO_ACTION
        logging.info(f"Value {current_value} below threshold {threshold_down}, scaling down")
        return SCALE_DOWN

    logging.info(f"No scaling needed, maintaining {current_size} instances")
    return NO_ACTION
