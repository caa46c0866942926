"""Utility functions for application configuration management.

This module provides a standardized interface for the engine to access
configuration data stored in **AWS AppConfig** or in environment variables.
Each environment (`APP_ENV`) has a dedicated AppConfig *Environment* within
the shared AppConfig *Application* identified by `APP_NAME`. Configuration
data is stored as a JSON document under a configuration profile (typically
`backend-config`).

The configuration JSON follows this structure:

    {
        "build": 42,
        "active_backend": "redis",
        "configs": {
            "shortener": {
                "redis": {"host": "...", "port": 6379, "db": 0},
                "engine": {"code_length": 7, "max_attempts": 8, ...}
            }
        }
    }

Typical usage:
    >>> from urlshortener.utils.config import load_config, ShortenerSettings
    >>> settings = ShortenerSettings.from_config(load_config('shortener'))
    >>> settings.backend
    'redis'
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass, field
from collections.abc import Callable, Mapping
from typing import Any

import boto3

from urlshortener.types import AppConfigDataClient, AppConfigDocument, ComponentConfiguration
from urlshortener.constants import ENV, Backend, DedupPolicy, GeneratorKind, Shortcode
from urlshortener.utils.helpers import require_environment
from urlshortener.utils.runtime import running_locally
from urlshortener.exceptions import AppConfigError, BadConfigurationError


logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs as <app name>:<app env>, None if APP_NAME is not set."""
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _extract_component(document: AppConfigDocument, component: str) -> ComponentConfiguration:
    """Pick the active backend section and the engine section for one component."""
    try:
        backend = document['active_backend']
        section = document['configs'][component]
        data = {backend: section[backend]}
    except (KeyError, TypeError) as e:
        raise AppConfigError(f"AppConfig document has no '{component}' configuration for its active backend.") from e

    if 'engine' in section:
        data['engine'] = section['engine']
    return data


def _load_local_appconfig(func: Callable) -> Callable:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running locally.

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local
          AppConfig agent.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Environment variables used:
        APPCONFIG_AGENT_URL     : Base URL of the local AppConfig Agent (e.g., http://appconfig-agent:2772).
        APPCONFIG_PROFILE_NAME  : Optional profile name (default: "backend-config").
    """

    def __validate_appconfig_url(url: str | None) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    @functools.wraps(func)
    def wrapper(component: str) -> ComponentConfiguration:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(component)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'component': component})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        data = _extract_component(document, component)
        logger.debug('Loaded AppConfig from local agent.', extra={'component': component, 'build': document.get('build')})
        return data

    return wrapper


@_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(component: str) -> ComponentConfiguration:
    """Load configuration for a given component from AWS AppConfig.

    Fetches the AppConfig JSON once and returns the active backend section
    (plus the optional `engine` section) of the requested component.

    Environment variables required:
        APPCONFIG_APP_ID       : AppConfig Application ID
        APPCONFIG_ENV_ID       : AppConfig Environment ID
        APPCONFIG_PROFILE_ID   : AppConfig Configuration Profile ID

    Args:
        component (str):
            Name of the configured component (e.g. "shortener").

    Returns:
        dict: {<backend>: {...}, 'engine': {...}}

    Raises:
        MissingEnvironmentVariableError: if an AppConfig identifier is not set.
        AppConfigError: if the document is not valid JSON or lacks the component.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'component': component})

    appconfig: AppConfigDataClient = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    try:
        document = json.loads(content.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise AppConfigError('AppConfig returned a document which is not valid JSON.') from e

    data = _extract_component(document, component)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'component': component, 'build': document.get('build')})
    return data


def _as_int(name: str, value: Any, minimum: int | None = None) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError) as e:
        raise BadConfigurationError(f"'{name}' must be an integer (given value: {value!r}).") from e
    if minimum is not None and result < minimum:
        raise BadConfigurationError(f"'{name}' must be at least {minimum} (given value: {result}).")
    return result


def _as_choice[E](name: str, value: Any, choices: type[E]) -> E:
    try:
        return choices(str(value).lower())
    except ValueError as e:
        allowed = ', '.join(choice.value for choice in choices)
        raise BadConfigurationError(f"'{name}' must be one of: {allowed} (given value: {value!r}).") from e


@dataclass(frozen=True)
class ShortenerSettings:
    """Engine configuration.

    Attributes:
        backend (Backend): mapping store implementation.
        redis (dict): keyword arguments for ShortURLRedisDAO (without the `redis_` prefix).
        code_length (int): length of every generated shortcode.
        generator (GeneratorKind): shortcode generation strategy.
        salt (str): secret salt of the counter generator.
        max_attempts (int): collision retry bound of the allocator.
        default_ttl_seconds (int | None): TTL applied when `shorten()` gets none. None disables expiry.
        dedup_policy (DedupPolicy): whether repeated targets reuse an existing live code.
    """

    backend: Backend = Backend.REDIS
    redis: dict[str, Any] = field(default_factory=dict)
    code_length: int = Shortcode.DEFAULT_LENGTH
    generator: GeneratorKind = GeneratorKind.RANDOM
    salt: str = Shortcode.DEFAULT_SALT
    max_attempts: int = Shortcode.DEFAULT_MAX_ATTEMPTS
    default_ttl_seconds: int | None = None
    dedup_policy: DedupPolicy = DedupPolicy.ALWAYS_NEW

    def __post_init__(self):
        if not Shortcode.MIN_LENGTH <= self.code_length <= Shortcode.MAX_LENGTH:
            raise BadConfigurationError(
                f"'code_length' must be between {Shortcode.MIN_LENGTH} and {Shortcode.MAX_LENGTH} (given value: {self.code_length})."
            )
        if self.max_attempts < 1:
            raise BadConfigurationError(f"'max_attempts' must be at least 1 (given value: {self.max_attempts}).")
        if self.default_ttl_seconds is not None and self.default_ttl_seconds <= 0:
            raise BadConfigurationError(f"'default_ttl_seconds' must be positive (given value: {self.default_ttl_seconds}).")
        if not self.salt:
            raise BadConfigurationError("'salt' must be a non-empty string.")

    @classmethod
    def from_mapping(cls, backend: Any, redis: Mapping[str, Any] | None, engine: Mapping[str, Any]) -> 'ShortenerSettings':
        ttl = engine.get('default_ttl_seconds')
        return cls(
            backend=_as_choice('backend', backend, Backend),
            redis=dict(redis or {}),
            code_length=_as_int('code_length', engine.get('code_length', Shortcode.DEFAULT_LENGTH)),
            generator=_as_choice('generator', engine.get('generator', GeneratorKind.RANDOM), GeneratorKind),
            salt=str(engine.get('salt', Shortcode.DEFAULT_SALT)),
            max_attempts=_as_int('max_attempts', engine.get('max_attempts', Shortcode.DEFAULT_MAX_ATTEMPTS)),
            default_ttl_seconds=None if ttl in (None, '') else _as_int('default_ttl_seconds', ttl, minimum=1),
            dedup_policy=_as_choice('dedup_policy', engine.get('dedup_policy', DedupPolicy.ALWAYS_NEW), DedupPolicy),
        )

    @classmethod
    def from_config(cls, config: ComponentConfiguration) -> 'ShortenerSettings':
        """Build settings from the output of `load_config()`.

        Example:
            >>> ShortenerSettings.from_config({'redis': {'host': 'redis'}, 'engine': {'code_length': 8}})
            ShortenerSettings(backend=<Backend.REDIS: 'redis'>, redis={'host': 'redis'}, code_length=8, ...)
        """
        backends = [key for key in config if key != 'engine']
        if len(backends) != 1:
            raise BadConfigurationError(f'Expected exactly one backend section (given: {backends}).')
        backend = backends[0]
        redis = config[backend] if backend == Backend.REDIS else None
        return cls.from_mapping(backend, redis, config.get('engine') or {})

    @classmethod
    def from_env(cls) -> 'ShortenerSettings':
        """Build settings from SHORTENER_* environment variables."""
        env = ENV.Shortener
        redis = {
            'host': os.getenv(env.REDIS_HOST, 'localhost'),
            'port': _as_int('port', os.getenv(env.REDIS_PORT, '6379')),
            'db': _as_int('db', os.getenv(env.REDIS_DB, '0')),
        }
        if os.getenv(env.REDIS_USERNAME):
            redis['username'] = os.environ[env.REDIS_USERNAME]
        if os.getenv(env.REDIS_PASSWORD):
            redis['password'] = os.environ[env.REDIS_PASSWORD]

        engine = {
            'code_length': os.getenv(env.CODE_LENGTH, Shortcode.DEFAULT_LENGTH),
            'generator': os.getenv(env.GENERATOR, GeneratorKind.RANDOM),
            'salt': os.getenv(env.SALT, Shortcode.DEFAULT_SALT),
            'max_attempts': os.getenv(env.MAX_ATTEMPTS, Shortcode.DEFAULT_MAX_ATTEMPTS),
            'default_ttl_seconds': os.getenv(env.DEFAULT_TTL_SECONDS),
            'dedup_policy': os.getenv(env.DEDUP_POLICY, DedupPolicy.ALWAYS_NEW),
        }
        return cls.from_mapping(os.getenv(env.BACKEND, Backend.REDIS), redis, engine)
