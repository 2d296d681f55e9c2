from kvshortener.services.key_allocator import KeyAllocator, is_valid_key
from kvshortener.services.rate_limiter import Admission, RateLimitDecision, RateLimiter, client_identity
from kvshortener.services.code_image_renderer import CaptionLayout, caption_for, encode_matrix, fit_caption, render


__all__ = [
    'KeyAllocator',
    'is_valid_key',
    'Admission',
    'RateLimitDecision',
    'RateLimiter',
    'client_identity',
    'CaptionLayout',
    'caption_for',
    'encode_matrix',
    'fit_caption',
    'render',
]
