import json
import logging

from urlshortener.constants import SHORTENER_COMPONENT
from urlshortener.engine import URLShortener
from urlshortener.dao.exceptions import DAOError
from urlshortener.exceptions import AppConfigError, ConfigurationError
from urlshortener.types import LambdaEvent, LambdaContext
from urlshortener.utils.config import ShortenerSettings, load_config
from urlshortener.lambdas.sweep_expired.constants import SUCCESS, ERROR


logger = logging.getLogger(__name__)


def response_success(*, removed: int) -> str:
    return json.dumps(
        {
            'status': SUCCESS,
            'removed': int(removed),
            'message': f'Removed {removed} expired short URLs',
        }
    )


def response_error(*, error: Exception) -> str:
    return json.dumps(
        {
            'status': ERROR,
            'message': 'Failed to sweep expired short URLs',
            'reason': str(error),
            'error': error.__class__.__name__,
        }
    )


def lambda_handler(event: LambdaEvent, context: LambdaContext) -> str:
    """Remove expired short URL mappings from the configured store

    Runs on an EventBridge schedule. Redis already drops expired links on its
    own, so a sweep mostly catches stragglers and keeps the memory footprint
    predictable.

    This Lambda handler follows this procedure:
    - Step 1: Load the shortener configuration from AppConfig
    - Step 2: Build the engine and sweep expired mappings
    - Step 3: Respond with success or error

    Diagnostic responses:
        success:
            status: success
            removed: <number of removed mappings>
            message: Removed <n> expired short URLs
        error:
            status: error
            message: Failed to sweep expired short URLs
            reason: <reason>
            error: <error class name> (e.g. DataStoreError, AppConfigError)

    Args:
        event (dict):
            EventBridge event payload.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        str: JSON-encoded diagnostic response.
    """
    try:
        settings = ShortenerSettings.from_config(load_config(SHORTENER_COMPONENT))
        shortener = URLShortener.from_settings(settings)
        removed = shortener.sweep()
    except (DAOError, ConfigurationError, AppConfigError) as error:
        logger.exception(
            'Failed to sweep expired short URLs.',
            extra={'event': ERROR, 'reason': str(error), 'error': error.__class__.__name__},
        )
        return response_error(error=error)
    else:
        logger.info(
            'Removed %s expired short URLs.',
            removed,
            extra={'event': SUCCESS, 'removed': removed},
        )
        return response_success(removed=removed)
