import io
import logging
import os
from typing import Optional

from PIL import Image

from iconraster.errors import EncodeError, FileIOError

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("PNG", "JPEG")
BUFFER_SIZE = 64 * 1024
DEFAULT_JPEG_QUALITY = 75
JPEG_BACKGROUND = (255, 255, 255)


def normalize_format(image_format: str) -> str:
    """Normalize a format name or file extension to ``PNG`` or ``JPEG``.

    Raises:
        EncodeError: If the format is not supported.
    """
    name = image_format.upper().lstrip(".")
    if name == "JPG":
        name = "JPEG"
    if name not in SUPPORTED_FORMATS:
        raise EncodeError(f"Unsupported image format: {image_format}", format=image_format)
    return name


def format_from_path(filepath: str) -> str:
    """Guess the image format from the file extension."""
    _, ext = os.path.splitext(filepath)
    if not ext:
        raise EncodeError(f"Cannot guess image format of {filepath}", format="")
    return normalize_format(ext)


def flatten_alpha(image: Image.Image, background: tuple[int, int, int] = JPEG_BACKGROUND) -> Image.Image:
    """Composite an RGBA image onto an opaque background color."""
    if image.mode != "RGBA":
        return image.convert("RGB")
    rgb_image = Image.new("RGB", image.size, background)
    rgb_image.paste(image, mask=image.split()[3])  # Use alpha as mask
    return rgb_image


def encode_image(image: Image.Image, image_format: str, quality: Optional[int] = None) -> bytes:
    """Encode a PIL image to bytes in the specified format.

    For JPEG format, RGBA images are converted to RGB with a white
    background; transparency is lost.

    Raises:
        EncodeError: If the format is unsupported or the codec fails.
    """
    image_format = normalize_format(image_format)
    options = {}
    if image_format == "JPEG":
        image = flatten_alpha(image)
        options["quality"] = DEFAULT_JPEG_QUALITY if quality is None else quality

    with io.BytesIO() as output:
        try:
            image.save(output, format=image_format, **options)
        except (OSError, ValueError, KeyError) as e:
            raise EncodeError(f"Failed to encode {image_format}: {e}", format=image_format) from e
        return output.getvalue()


def save_image(
    image: Image.Image, filepath: str, image_format: str, quality: Optional[int] = None
) -> None:
    """Encode a PIL Image and write it to file.

    The image is encoded in memory first, then written through a buffered
    writer that is flushed and synced before returning. The file is closed
    on every exit path.

    Args:
        image: PIL Image to save.
        filepath: Output file path.
        image_format: ``PNG`` or ``JPEG``.
        quality: JPEG quality, 1-95. Ignored for PNG.

    Raises:
        EncodeError: If encoding fails. Nothing is written.
        FileIOError: If creating, writing or flushing the file fails.
    """
    data = encode_image(image, image_format, quality=quality)

    try:
        raw = io.FileIO(filepath, "w")
    except OSError as e:
        raise FileIOError(f"Cannot create {filepath}: {e}", stage="create", filepath=filepath) from e

    writer = io.BufferedWriter(raw, buffer_size=BUFFER_SIZE)
    try:
        try:
            writer.write(data)
        except OSError as e:
            raise FileIOError(f"Cannot write {filepath}: {e}", stage="write", filepath=filepath) from e
        try:
            writer.flush()
            os.fsync(writer.fileno())
        except OSError as e:
            raise FileIOError(f"Cannot flush {filepath}: {e}", stage="flush", filepath=filepath) from e
    except FileIOError:
        _close_after_error(writer, filepath)
        raise

    # Closing flushes whatever is still buffered.
    try:
        writer.close()
    except OSError as e:
        raise FileIOError(f"Cannot flush {filepath}: {e}", stage="flush", filepath=filepath) from e
    logger.debug("Wrote %d bytes to %s", len(data), filepath)


def _close_after_error(writer: io.BufferedWriter, filepath: str) -> None:
    """Close the file after a failure; the first error is the one reported."""
    try:
        writer.close()
    except OSError as e:
        logger.debug("Error closing %s after a failed write: %s", filepath, e)
