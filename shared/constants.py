"""
Shared constants used across the platform.
"""

# Library fixture
SONGS_FILENAME = "songs.json"

# Media URL signing
DEFAULT_URL_EXPIRES_IN = 3600  # seconds

# S3 Provider endpoints
CLOUDFLARE_R2_ENDPOINT_TEMPLATE = "https://{account_id}.r2.cloudflarestorage.com"
AWS_S3_ENDPOINT_TEMPLATE = "https://s3.{region}.amazonaws.com"

# Configuration paths
DEFAULT_CONFIG_DIR = "~/.config/soundgrid"
DEFAULT_SONGS_PATH = DEFAULT_CONFIG_DIR + "/" + SONGS_FILENAME
DEFAULT_MEDIA_DIR = "~/.local/share/soundgrid/media"

# API
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 5006
VIEWER_HEADER = "X-Viewer-Id"
VIEWER_SESSION_KEY = "viewer_id"

# Library page copy
LIBRARY_TITLE = "Discover Music"
LIBRARY_SUBTITLE = "Explore amazing songs created by our community"
EMPTY_STATE_TITLE = "No Songs Available"
EMPTY_STATE_MESSAGE = "No published songs found. Check back later!"
UNTITLED = "Untitled"
NO_DESCRIPTION = "No description"
