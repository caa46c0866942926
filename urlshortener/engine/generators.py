"""Shortcode generators

A generator proposes candidate shortcodes for a target URL. It never checks
uniqueness: the allocator does, by trying to commit each candidate. The
`attempt` argument numbers the candidates requested for one allocation so a
generator never has to return the same value twice in a row.

Classes:
    CodeGenerator:
        Abstract base defining generate() and the syntactic code policy.
    RandomCodeGenerator:
        Uniformly random codes drawn with the `secrets` CSPRNG (default).
    CounterCodeGenerator:
        Codes scrambled from an atomic counter owned by the mapping store.

Example:
    >>> generator = RandomCodeGenerator(length=7)
    >>> code = generator.generate('https://example.com', attempt=0)
    >>> generator.is_valid(code)
    True
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from urlshortener.constants import Shortcode
from urlshortener.utils.shortener import ALPHABET, generate_shortcode, random_shortcode, is_valid_shortcode


class CodeGenerator(ABC):
    """Interface for shortcode generators.

    Attributes:
        length (int): exact length of every generated code.
        alphabet (str): characters a code is made of (base62).
    """

    alphabet = ALPHABET

    def __init__(self, length: int = Shortcode.DEFAULT_LENGTH):
        if not isinstance(length, int) or isinstance(length, bool):
            raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
        if not Shortcode.MIN_LENGTH <= length <= Shortcode.MAX_LENGTH:
            raise ValueError(f'Length must be between {Shortcode.MIN_LENGTH} and {Shortcode.MAX_LENGTH} (given value: {length}).')
        self.length = length

    @abstractmethod
    def generate(self, target: str, attempt: int) -> str:
        """Propose a candidate shortcode.

        Args:
            target (str): the URL being shortened.
            attempt (int): zero-based index of the candidate within one allocation.

        Returns:
            str: a syntactically valid shortcode.
        """
        pass

    def is_valid(self, shortcode: object) -> bool:
        return is_valid_shortcode(shortcode, self.length)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(length={self.length})'


class RandomCodeGenerator(CodeGenerator):
    def generate(self, target: str, attempt: int) -> str:
        return random_shortcode(self.length)


class CounterCodeGenerator(CodeGenerator):
    """Scramble a store-owned counter into a fixed-length code.

    Each candidate consumes a fresh counter value, so retries never repeat.
    The counter must be atomically incremented by the mapping store, e.g.
    `functools.partial(dao.count, increment=True)`.

    Example:
        >>> generator = CounterCodeGenerator(counter=functools.partial(dao.count, increment=True), salt='my_secret')
        >>> generator.generate('https://example.com', attempt=0)
        'Gh71WPT'
    """

    def __init__(self, counter: Callable[[], int], salt: str = Shortcode.DEFAULT_SALT, length: int = Shortcode.DEFAULT_LENGTH):
        super().__init__(length)
        if not isinstance(salt, str) or not salt:
            raise ValueError('Salt must be a non-empty string.')
        self.counter = counter
        self.salt = salt

    def generate(self, target: str, attempt: int) -> str:
        return generate_shortcode(self.counter(), salt=self.salt, length=self.length)
