from sealedshortener.service.url_service import ShortURLService
from sealedshortener.service.factory import build_service, get_service


__all__ = [
    'ShortURLService',
    'build_service',
    'get_service',
]
