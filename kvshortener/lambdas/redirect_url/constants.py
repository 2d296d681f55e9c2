# Log event / error codes
MISSING_KEY = 'MISSING_KEY'
INVALID_KEY = 'INVALID_KEY'
SHORT_LINK_NOT_FOUND = 'SHORT_LINK_NOT_FOUND'
BAD_CONFIGURATION = 'BAD_CONFIGURATION'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
