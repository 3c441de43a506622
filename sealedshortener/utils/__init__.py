from sealedshortener.utils.config import app_env, app_name, app_prefix, load_config
from sealedshortener.utils.helpers import base_url, get_short_url, guarantee_500_response
from sealedshortener.utils.shortener import generate_shortcode
from sealedshortener.utils.validators import normalize_url, validate_alias
from sealedshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'normalize_url',
    'validate_alias',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'base_url',
    'get_short_url',
    'guarantee_500_response',
    'initialize_logging',
]
