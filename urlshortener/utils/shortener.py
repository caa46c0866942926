"""Shortcode encoding utilities

This module provides the base62 primitives the code generators are built on:
a counter scrambler producing short, deterministic, non-sequential codes from
a numeric counter and a secret salt, a uniform random code, and the syntactic
check resolution uses to reject malformed codes before any store round trip.

Functions:
    generate_shortcode(counter, salt='default_salt', length=7, mult=1315423911):
        Scramble a counter into a fixed-length base62 code.
    random_shortcode(length=7):
        Draw a uniformly random fixed-length base62 code.
    is_valid_shortcode(shortcode, length=7):
        Check a code against the alphabet and length policy.

Example:
    >>> from urlshortener.utils import generate_shortcode
    >>> generate_shortcode(12345, salt='my_secret')
    'Gh71WPT'
"""

import math
import secrets

import xxhash

from urlshortener.constants import Shortcode


ALPHABET = Shortcode.ALPHABET
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def encode_base62(value: int, length: int) -> str:
    """Encode a non-negative integer as a fixed-length base62 string.

    Values wider than `length` digits keep their least significant digits.
    Shorter values are left-padded with ALPHABET[0].
    """
    # 1- Encode the value into base62 digits, least significant first
    # 2- Reverse so the most significant digit comes first
    # 3- Pad with leading ALPHABET[0] characters to ensure fixed length
    return ''.join(reversed([ALPHABET[(value // BASE**i) % BASE] for i in range(length)])).rjust(length, ALPHABET[0])


def generate_shortcode(counter: int, salt: str = Shortcode.DEFAULT_SALT, length: int = Shortcode.DEFAULT_LENGTH, mult: int = 1315423911) -> str:
    """Generate a short, deterministic shortcode from a counter and salt.

    This function encodes a numeric counter into an n-character Base62 string
    (using a-z, A-Z, 0-9). The counter is salted and wrapped in modulo
    BASE^length to ensure fixed-length output.

    This implementation uses a **multiplicative permutation** over a fixed
    Base62 space to guarantee:
    - 1:1 mapping (bijective)
    - Deterministic output
    - No visible sequential patterns
    - Constant-time execution

    Args:
        counter (int):
            Unique integer value identifying the URL.

        salt (str, optional):
            Secret string used to randomize the output space.
            Defaults to "default_salt".
            Highly recommended to set a custom salt for security.

        length (int, optional):
            Length of the resulting code. Defaults to 7.

        mult (int, optional):
            Multiplicative factor for the permutation.
            Defaults to 1315423911.
            Must be coprime with mod (BASE**length).

    Returns:
        str: A short alphanumeric code derived from the counter and salt.

    Example:
        >>> generate_shortcode(12345, salt='my_secret', length=7)
        'Gh71WPT'

    NOTE:
        - Codes repeat once the counter wraps around BASE**length. The
          allocator treats such a repeat as an ordinary collision.
        - The output is not trivially predictable without knowledge of the salt
          and permutation parameters (this is obfuscation, not encryption).
    """
    if not isinstance(counter, int) or isinstance(counter, bool):
        raise TypeError(f'Counter must be of type integer (given type: {type(counter)}).')
    if counter < 0:
        raise ValueError(f'Counter must be a non-negative integer (given value: {counter}).')
    if not isinstance(salt, str):
        raise TypeError(f'Salt must be of type string (given type: {type(salt)}).')
    if not salt:
        raise ValueError(f'Salt must be a non-empty string (given value: {salt}).')
    if math.gcd(mult, BASE**length) != 1:
        raise ValueError(f'Multiplicative factor must be coprime with mod ({BASE**length}) (given value: mult={mult}).')

    # Affine (multiplicative + additive) permutation over the fixed modulo
    # space: sequential counters are scrambled while keeping a 1:1 mapping
    # as long as `counter < BASE**length`.
    modulo_space = BASE**length
    salt_hash = xxhash.xxh64_intdigest(salt) % modulo_space
    permuted = (counter * mult + salt_hash) % modulo_space

    return encode_base62(permuted, length)


def random_shortcode(length: int = Shortcode.DEFAULT_LENGTH) -> str:
    """Draw a uniformly random base62 shortcode using the `secrets` CSPRNG."""
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))


def is_valid_shortcode(shortcode: object, length: int = Shortcode.DEFAULT_LENGTH) -> bool:
    """Check that a shortcode matches the generation policy.

    Args:
        shortcode (object):
            Candidate code, usually taken verbatim from a request path.
        length (int):
            Exact length every generated code has.

    Returns:
        bool: True if the code is a string of `length` base62 characters.

    Example:
        >>> is_valid_shortcode('aZ3kT1x')
        True
        >>> is_valid_shortcode('doesNotExist')
        False
    """
    return isinstance(shortcode, str) and len(shortcode) == length and all(c in ALPHABET for c in shortcode)
