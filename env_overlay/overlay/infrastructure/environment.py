"""Process environment source."""

import os
from collections.abc import Mapping


def process_environment() -> Mapping[str, str]:
    """Return a snapshot of the process environment.

    The snapshot keeps one overlay call consistent even if the environment is
    modified while it runs.
    """
    return dict(os.environ)
