"""Navigator Vault constants."""

# Credential presentation
AUTH_HEADER = 'Authorization'
BEARER_PREFIX = 'Bearer '

# Session tokens
TOKEN_ALGORITHM = 'HS256'
TOKEN_TTL = 3600  # seconds

# Request keys
SESSION_CONTEXT = 'vault_session'

# Transport
DEFAULT_PORT = 3000
GRAPHQL_PATH = '/graphql'
MAX_BODY_SIZE = 100 * 1024  # bytes
