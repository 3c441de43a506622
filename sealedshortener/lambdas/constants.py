# Event / error codes attached to handler logs and error responses
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_URL = 'MISSING_URL'
INVALID_URL = 'INVALID_URL'
INVALID_ALIAS = 'INVALID_ALIAS'
ALIAS_ALREADY_EXISTS = 'ALIAS_ALREADY_EXISTS'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
SHORTEN_FAILED = 'SHORTEN_FAILED'
ENCRYPTION_FAILED = 'ENCRYPTION_FAILED'

MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
REDIRECT_FAILED = 'REDIRECT_FAILED'
DECRYPTION_FAILED = 'DECRYPTION_FAILED'

SERVICE_UNAVAILABLE = 'SERVICE_UNAVAILABLE'
