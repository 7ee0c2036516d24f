"""Value range -> bucket span mapping."""

import logging

from src.pm_common.errors import InvalidInputError, InvalidRangeError
from src.pm_pricing.domain.models import BucketSpan

logger = logging.getLogger(__name__)


def map_range_to_buckets(range_min: int, range_max: int, bucket_width: int) -> BucketSpan:
    """Map the half-open value range [range_min, range_max) onto bucket indices.

    Indices are absolute (value // bucket_width), not relative to the market's
    min_value: the on-chain distribution is keyed the same way.
    """
    if bucket_width <= 0:
        raise InvalidInputError(f"bucket_width must be positive, got {bucket_width}")
    if range_min >= range_max:
        raise InvalidRangeError(range_min, range_max)

    span = BucketSpan(start=range_min // bucket_width, end=(range_max - 1) // bucket_width)
    logger.debug("range %d-%d -> buckets %d-%d", range_min, range_max, span.start, span.end)
    return span
