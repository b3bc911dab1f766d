"""
Centralized constants for the purification pipeline.
All magic numbers in one place.
"""

# ===========================================
# PURITY
# ===========================================
PURITY_MAX = 100.0                    # vacuous / perfect purity
PURITY_DECIMALS = 2                   # rounding of reported scores

# Default per-content-type thresholds (percent of alphabetic chars)
THRESHOLD_UI_LABEL = 100.0            # short, highly visible text
THRESHOLD_CHAT_MESSAGE = 95.0
THRESHOLD_LEGAL_DOCUMENT = 90.0       # long-form text tolerates citations

# ===========================================
# PROVIDERS
# ===========================================
PROVIDER_ORDER = ["openai", "claude", "gemini", "deepseek"]
PROVIDER_MAX_TOKENS = 4096            # max tokens per request
PROVIDER_TEMPERATURE = 0.2            # low temperature for legal text

INTERACTIVE_CALL_TIMEOUT = 8.0        # seconds per provider call
INTERACTIVE_REQUEST_DEADLINE = 15.0   # seconds across all providers
BATCH_CALL_TIMEOUT = 30.0
BATCH_REQUEST_DEADLINE = 90.0

# ===========================================
# SANITIZER
# ===========================================
SANITIZER_MAX_RUN_LENGTH = 12         # foreign letters; longer runs are refused
SANITIZER_RULESET_VERSION = "2024.4"

# ===========================================
# CACHE
# ===========================================
CACHE_TTL_SECONDS = 86400             # 24 hours
CACHE_MAX_ENTRIES = 5000

# ===========================================
# AUDITOR
# ===========================================
AUDIT_INTERVAL_SECONDS = 60.0

# ===========================================
# LOGGING
# ===========================================
LOG_LEVEL = 'INFO'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE = 'logs/purifier.log'
LOG_MAX_SIZE_MB = 10
LOG_BACKUP_COUNT = 5
LOG_TEXT_PREVIEW_CHARS = 80           # raw text is truncated in logs
