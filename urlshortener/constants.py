import string
from enum import StrEnum


class Shortcode:
    """Shortcode generation policy."""

    ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
    DEFAULT_LENGTH = 7
    MIN_LENGTH = 6  # 62**6 > 5.6 * 10**10 combinations
    MAX_LENGTH = 16
    DEFAULT_MAX_ATTEMPTS = 8
    DEFAULT_SALT = 'default_salt'


class Target:
    """Target URL acceptance policy."""

    MAX_LENGTH = 2048
    ALLOWED_SCHEMES = frozenset({'http', 'https'})


class DedupPolicy(StrEnum):
    ALWAYS_NEW = 'always_new'
    REUSE_EXISTING = 'reuse_existing'


class GeneratorKind(StrEnum):
    RANDOM = 'random'
    COUNTER = 'counter'


class Backend(StrEnum):
    REDIS = 'redis'
    MEMORY = 'memory'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class Shortener(StrEnum):
        BACKEND = 'SHORTENER_BACKEND'
        REDIS_HOST = 'SHORTENER_REDIS_HOST'
        REDIS_PORT = 'SHORTENER_REDIS_PORT'
        REDIS_DB = 'SHORTENER_REDIS_DB'
        REDIS_USERNAME = 'SHORTENER_REDIS_USERNAME'
        REDIS_PASSWORD = 'SHORTENER_REDIS_PASSWORD'  # noqa: S105
        CODE_LENGTH = 'SHORTENER_CODE_LENGTH'
        GENERATOR = 'SHORTENER_GENERATOR'
        SALT = 'SHORTENER_SALT'
        MAX_ATTEMPTS = 'SHORTENER_MAX_ATTEMPTS'
        DEFAULT_TTL_SECONDS = 'SHORTENER_DEFAULT_TTL_SECONDS'
        DEDUP_POLICY = 'SHORTENER_DEDUP_POLICY'


# AppConfig component holding the engine configuration
SHORTENER_COMPONENT = 'shortener'
