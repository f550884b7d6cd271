"""
Custom validators for marketplace models.
"""

import re
from django.core.exceptions import ValidationError


MOBILE_NUMBER_PATTERN = re.compile(r'^(\+880|0)?1[3-9]\d{8}$')


def validate_mobile_number(value):
    """
    Validate Bangladeshi mobile number format.

    Accepts an optional +880 or 0 prefix followed by an operator code
    (13-19) and eight digits. Spaces and dashes are ignored.

    Valid formats:
    - 01712345678
    - +8801712345678
    - 1712345678
    - 017-1234-5678

    Args:
        value: Mobile number string to validate

    Raises:
        ValidationError: If mobile number format is invalid
    """
    if not value:  # Empty string is allowed (optional field)
        return

    compact = re.sub(r'[\s\-]', '', value)

    if not MOBILE_NUMBER_PATTERN.match(compact):
        raise ValidationError(
            'Enter a valid Bangladeshi mobile number, e.g. 01712345678.',
            code='invalid_mobile'
        )


def validate_rating_score(value):
    """
    Validate a single category score is an integer from 1 to 5.

    Args:
        value: Score to validate

    Raises:
        ValidationError: If the score is not an integer in range
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            'Rating must be an integer.',
            code='rating_not_integer'
        )

    if value < 1 or value > 5:
        raise ValidationError(
            'Rating must be between 1 and 5.',
            code='rating_out_of_range'
        )
