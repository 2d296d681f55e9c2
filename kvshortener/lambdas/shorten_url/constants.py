# Log event / error codes
RATE_LIMITED = 'RATE_LIMITED'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_TARGET_URL = 'MISSING_TARGET_URL'
INVALID_TARGET_URL = 'INVALID_TARGET_URL'
INVALID_CUSTOM_PATH = 'INVALID_CUSTOM_PATH'
CUSTOM_PATH_IN_USE = 'CUSTOM_PATH_IN_USE'
ALLOCATION_EXHAUSTED = 'ALLOCATION_EXHAUSTED'
BAD_CONFIGURATION = 'BAD_CONFIGURATION'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
