"""Resource limits for rasterization.

This module provides configurable limits that bound the memory a single
render call may allocate. Pathological target resolutions are rejected
before any pixel buffer is created.
"""

import logging
import os
from dataclasses import dataclass

from iconraster.errors import ResourceLimitError

logger = logging.getLogger(__name__)

# Largest edge Pillow's JPEG/WebP writers accept
MAX_CODEC_DIMENSION = 65500

DEFAULT_MAX_PIXEL_COUNT = 64 * 1024 * 1024


@dataclass
class ResourceLimits:
    """Resource limits for render operations.

    These limits constrain:
    - Total pixel count of the output image (prevents memory exhaustion)
    - Width or height of the output image in pixels

    Limits can be configured via environment variables or constructor parameters.
    Constructor parameters take precedence over environment variables.

    Environment variables:
        ICONRASTER_MAX_PIXEL_COUNT: Maximum width * height (default: 67108864)
        ICONRASTER_MAX_IMAGE_DIMENSION: Maximum width or height in pixels
            (default: 65500)

    Example:
        >>> limits = ResourceLimits.default()
        >>> limits = ResourceLimits(max_pixel_count=1024 * 1024)
        >>> limits = ResourceLimits(max_image_dimension=0)  # No dimension limit
    """

    max_pixel_count: int = DEFAULT_MAX_PIXEL_COUNT
    max_image_dimension: int = MAX_CODEC_DIMENSION

    @classmethod
    def default(cls) -> "ResourceLimits":
        """Create ResourceLimits with default values from environment variables.

        Raises:
            ValueError: If environment variable contains invalid integer value.

        Note:
            Negative values are treated as 0 (disabled limit) with a warning logged.
        """

        def parse_env_int(key: str, default: int) -> int:
            value_str = os.environ.get(key)
            if value_str is None:
                return default

            try:
                value = int(value_str)
            except ValueError as e:
                raise ValueError(
                    f"Environment variable {key}={value_str!r} is not a valid integer"
                ) from e

            if value < 0:
                logger.warning(
                    f"Environment variable {key}={value} is negative, "
                    f"treating as 0 (disabled limit). "
                    f"Consider using ResourceLimits.unlimited() instead."
                )
                return 0

            return value

        return cls(
            max_pixel_count=parse_env_int(
                "ICONRASTER_MAX_PIXEL_COUNT", DEFAULT_MAX_PIXEL_COUNT
            ),
            max_image_dimension=parse_env_int(
                "ICONRASTER_MAX_IMAGE_DIMENSION", MAX_CODEC_DIMENSION
            ),
        )

    @classmethod
    def unlimited(cls) -> "ResourceLimits":
        """Create ResourceLimits with all limits disabled.

        Warning:
            Only use this for trusted input in controlled environments.
        """
        return cls(max_pixel_count=0, max_image_dimension=0)

    def is_pixel_count_limited(self) -> bool:
        """Check if pixel count limit is enabled."""
        return self.max_pixel_count > 0

    def is_image_dimension_limited(self) -> bool:
        """Check if image dimension limit is enabled."""
        return self.max_image_dimension > 0

    def check_size(self, width: int, height: int) -> None:
        """Validate an output size against the limits.

        Raises:
            ResourceLimitError: If either limit is exceeded.
        """
        if self.is_image_dimension_limited():
            if width > self.max_image_dimension or height > self.max_image_dimension:
                raise ResourceLimitError(
                    f"Image size {width}x{height} exceeds maximum dimension "
                    f"{self.max_image_dimension}. To process: set "
                    f"ICONRASTER_MAX_IMAGE_DIMENSION or use "
                    f"ResourceLimits(max_image_dimension=...)."
                )
        if self.is_pixel_count_limited():
            if width * height > self.max_pixel_count:
                raise ResourceLimitError(
                    f"Image size {width}x{height} exceeds maximum pixel count "
                    f"{self.max_pixel_count}. To process: set "
                    f"ICONRASTER_MAX_PIXEL_COUNT or use "
                    f"ResourceLimits(max_pixel_count=...)."
                )
