"""Precision settings for perfect_time.

Each setting is a count of base-10 fractional digits. Parsing, rounding and
formatting all read them from here, so the canonical layout is fixed in one place.
"""

# Character delimiting the integer part from the fractional part
RADIX_POINT = "."

# Fractional digits stored in every canonical value (attosecond resolution)
FRACTIONAL_DIGITS = 18

# Fractional digits kept mid-calculation, before rounding to FRACTIONAL_DIGITS
WORKING_PRECISION = 50

# Fractional digits of strings returned by unit conversion
OUTPUT_PRECISION = 18
