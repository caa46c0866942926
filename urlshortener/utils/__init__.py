from urlshortener.utils.config import app_env, app_name, app_prefix, load_config, ShortenerSettings
from urlshortener.utils.helpers import get_short_url, expiry_from_ttl, require_environment
from urlshortener.utils.shortener import generate_shortcode, random_shortcode, is_valid_shortcode
from urlshortener.utils.validators import validate_target_url, validate_ttl
from urlshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'random_shortcode',
    'is_valid_shortcode',
    'validate_target_url',
    'validate_ttl',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'ShortenerSettings',
    'get_short_url',
    'expiry_from_ttl',
    'require_environment',
    'initialize_logging',
]
