"""Unit tests for helper utilities in helpers.py.

Test coverage includes:

1. get_short_url()
2. Epoch millisecond conversions
3. expiry_from_ttl()
4. require_environment()
"""

from datetime import datetime, timedelta, UTC

import pytest
from freezegun import freeze_time

from urlshortener.exceptions import MissingEnvironmentVariableError
from urlshortener.utils.helpers import get_short_url, to_epoch_ms, from_epoch_ms, expiry_from_ttl, require_environment


# -------------------------------
# 1. get_short_url()
# -------------------------------


@pytest.mark.parametrize('base_url', ['https://sho.rt', 'https://sho.rt/'])
def test_get_short_url(base_url):
    assert get_short_url('aZ3kT1x', base_url) == 'https://sho.rt/aZ3kT1x'


# -------------------------------
# 2. Epoch millisecond conversions
# -------------------------------


def test_to_epoch_ms():
    assert to_epoch_ms(datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=UTC)) == 1500


@pytest.mark.parametrize('value', [1500, '1500'])
def test_from_epoch_ms(value):
    assert from_epoch_ms(value) == datetime(1970, 1, 1, 0, 0, 1, 500000, tzinfo=UTC)


def test_epoch_ms_keeps_millisecond_precision():
    moment = datetime(2026, 10, 18, 12, 0, 0, 123000, tzinfo=UTC)
    assert from_epoch_ms(to_epoch_ms(moment)) == moment


# -------------------------------
# 3. expiry_from_ttl()
# -------------------------------


def test_expiry_from_ttl_none():
    assert expiry_from_ttl(None) is None


@freeze_time('2026-10-18 12:00:00')
def test_expiry_from_ttl_defaults_to_now():
    assert expiry_from_ttl(60) == datetime(2026, 10, 18, 12, 1, 0, tzinfo=UTC)


def test_expiry_from_ttl_with_reference():
    now = datetime(2026, 1, 1, tzinfo=UTC)
    assert expiry_from_ttl(86400, now=now) == now + timedelta(days=1)


# -------------------------------
# 4. require_environment()
# -------------------------------


def test_require_environment_passes(monkeypatch):
    monkeypatch.setenv('REQUIRED_A', 'a')

    @require_environment('REQUIRED_A')
    def func(value):
        return value

    assert func(42) == 42


def test_require_environment_lists_missing(monkeypatch):
    monkeypatch.delenv('REQUIRED_A', raising=False)
    monkeypatch.setenv('REQUIRED_B', '')

    @require_environment('REQUIRED_A', 'REQUIRED_B')
    def func():
        pass

    with pytest.raises(MissingEnvironmentVariableError, match="'REQUIRED_A', 'REQUIRED_B'"):
        func()
