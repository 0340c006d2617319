"""Centralized constants for hifz.

Scheduling numbers and storage defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Leitner schedule ----------
INTERVALS = (1, 3, 7, 14, 30)  # days, indexed by box - 1
MIN_BOX = 0
MAX_BOX = 5
MS_PER_DAY = 86_400_000

# ---------- Card defaults ----------
DEFAULT_EASE_FACTOR = 2.5

# ---------- Storage ----------
DEFAULT_NAMESPACE = "ijtihad_srs_data"
REVIEW_LOG_SUFFIX = "_reviews"
