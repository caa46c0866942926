from urlshortener.engine.generators import CodeGenerator, RandomCodeGenerator, CounterCodeGenerator
from urlshortener.engine.allocator import CodeAllocator
from urlshortener.engine.resolution import Resolution, ResolutionService
from urlshortener.engine.shortener import URLShortener


__all__ = [
    'CodeGenerator',
    'RandomCodeGenerator',
    'CounterCodeGenerator',
    'CodeAllocator',
    'Resolution',
    'ResolutionService',
    'URLShortener',
]
