"""Centralized constants for the Drive diagnostics package."""

# Feature keys
FEATURE_DRIVE = 'drive'
FEATURE_AUTH = 'auth'

# Redirect path suffixes appended to the environment origin
DEFAULT_REDIRECT_PATHS = {
    FEATURE_DRIVE: '/account?tab=storage',
    FEATURE_AUTH: '/auth/callback',
}

# Origins registered in the Google Cloud Console besides the current one
DEFAULT_CANONICAL_ORIGINS = [
    'https://app.scriptony.de',
    'https://preview.scriptony.de',
    'https://admin.scriptony.de',
]

# Ordered domain rules: (hostname pattern, environment kind)
DEFAULT_DOMAIN_RULES = [
    (r'(localhost|127\.0\.0\.1|0\.0\.0\.0|\[::1\])(:\d+)?', 'local'),
    (r'(10\.\d+|192\.168|172\.(1[6-9]|2\d|3[01]))\.\d+\.\d+(:\d+)?', 'local'),
    (r'[a-z0-9-]+\.local(:\d+)?', 'local'),
    (r'preview\.scriptony\.de', 'preview'),
    (r'([a-z0-9-]+\.)+lovable\.app', 'preview'),
    (r'([a-z0-9-]+\.)+lovableproject\.com', 'preview'),
    (r'(admin|staging)\.scriptony\.de', 'staging'),
    (r'((app|www)\.)?scriptony\.de', 'production'),
]

# Google endpoints
GOOGLE_PROBE_URL = 'https://accounts.google.com/favicon.ico'
GOOGLE_CONSOLE_CREDENTIALS_URL = 'https://console.cloud.google.com/apis/credentials'

# Default Values
DEFAULT_PREVIEW_LENGTH = 12
DEFAULT_PROBE_TIMEOUT = 5.0
DEFAULT_CREDENTIAL_TIMEOUT = 5.0

# Feature keys are used in env var names and URLs
FEATURE_KEY_PATTERN = r'[a-z][a-z0-9_-]{0,31}'
