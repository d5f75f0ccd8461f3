"""
Outline loading limits and constants.

Centralized defaults for load-time bounds and store key layout,
used when no settings file or environment override is present.
"""

# Load-time bounds
MAX_LOAD_DEPTH = 256
"""Maximum nesting depth accepted when rebuilding a stored outline tree"""

MAX_LOAD_ITEMS = 100_000
"""Maximum number of outline items materialized from a single root"""

# Redis key layout
DEFAULT_REDIS_PREFIX = "outline:"
"""Prefix for all record keys written by RedisObjectStore"""

# Settings file
SETTINGS_ENV_VAR = "OUTLINES_CONFIG"
"""Environment variable naming the YAML settings file"""
