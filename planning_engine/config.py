"""
Engine-wide constants and logging setup.

Per-call overrides are passed as keyword arguments to the scheduler; the
values here are the defaults.
"""

import logging
import sys

# Slack below this many working days counts as zero.
CRITICAL_SLACK_TOLERANCE = 0.01

# numpy weekmask, Monday first: Saturday and Sunday are non-working.
WORKING_WEEKMASK = "1111100"

HOURS_PER_WORKING_DAY = 8

# Fractional durations closer than this to a whole number are treated as whole.
FRACTION_EPSILON = 1e-6

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_LEVEL = "WARNING"


def configure_logging(level=DEFAULT_LOG_LEVEL, stream=None):
    """Configure root logging for command line use."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(stream or sys.stderr)],
        force=True,
    )
    # matplotlib is chatty at DEBUG
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
