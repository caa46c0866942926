"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if the engine is running on a developer machine or in local SAM.

Example:
    >>> from urlshortener.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
"""

import os

from urlshortener.constants import ENV


def running_locally() -> bool:
    """Return True if running locally (APP_ENV=local or SAM local), False otherwise."""
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'
