from kvshortener.models.short_link_model import ShortLinkModel
from kvshortener.models.rate_window_model import RateWindowModel
from kvshortener.models.code_image_model import CodeImageModel


__all__ = [
    'ShortLinkModel',
    'RateWindowModel',
    'CodeImageModel',
]
