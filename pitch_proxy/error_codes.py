"""Stable failure codes for proxy and auth operations.

Used by: clients, proxy service, auth dependency, logging.
"""

# Vendor codes
GEMINI_DISABLED = "GEMINI_DISABLED"      # No GEMINI_KEY configured
PEXELS_DISABLED = "PEXELS_DISABLED"      # No PEXEL_KEY configured
EMPTY_INPUT = "EMPTY_INPUT"              # Missing prompt / query / system instruction
VENDOR_FAIL = "VENDOR_FAIL"              # Timeout, 429, network error, SDK error

# Auth codes
TOKEN_MISSING = "TOKEN_MISSING"
TOKEN_INVALID = "TOKEN_INVALID"
