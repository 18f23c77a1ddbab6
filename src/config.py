"""
Configuration module for loading environment variables.

This module loads environment variables from .env file and exposes
the tunable thresholds used by the bulk-upload normalization engine.
"""

import os
from dotenv import load_dotenv
load_dotenv()

# Score added to a column whose header contains a known alias for a field.
# Large enough that an explicit header always outranks content-only evidence.
ALIAS_HEADER_BONUS = int(os.getenv("BULK_ALIAS_HEADER_BONUS", "1000"))

# Minimum percentage of a column's non-blank values that must match a field's
# shape predicate before the match rate counts towards that field's score.
CONTENT_MATCH_THRESHOLD = float(os.getenv("BULK_CONTENT_MATCH_THRESHOLD", "50"))

# Rows kept per upload after dedupe
MAX_BULK_ROWS = int(os.getenv("BULK_MAX_ROWS", "500"))
