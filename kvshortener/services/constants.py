# Log event codes emitted by the core services
KEY_ALLOCATED = 'KEY_ALLOCATED'
KEY_COLLISION = 'KEY_COLLISION'
KEY_OVERWRITTEN = 'KEY_OVERWRITTEN'
ALLOCATION_EXHAUSTED = 'ALLOCATION_EXHAUSTED'
CUSTOM_PATH_CLAIMED = 'CUSTOM_PATH_CLAIMED'
CUSTOM_PATH_IN_USE = 'CUSTOM_PATH_IN_USE'
RATE_LIMITED = 'RATE_LIMITED'
RATE_RECORD_CORRUPT = 'RATE_RECORD_CORRUPT'
ENCODING_FAILED = 'ENCODING_FAILED'
