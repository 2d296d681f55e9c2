# Log event / error codes
NOT_AN_SVG_REQUEST = 'NOT_AN_SVG_REQUEST'
SHORT_LINK_NOT_FOUND = 'SHORT_LINK_NOT_FOUND'
ENCODING_FAILED = 'ENCODING_FAILED'
BAD_CONFIGURATION = 'BAD_CONFIGURATION'
RENDER_SUCCESS = 'RENDER_SUCCESS'
