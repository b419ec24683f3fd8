"""Decoding of resolved image data."""

import io
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from markdown_spans.formatting.ir import EmbeddedImage


class ImageDecodeError(Exception):
    """Resolved image data could not be decoded."""

    pass


# Modes Pillow can write as PNG without conversion
PNG_MODES = ("1", "L", "LA", "P", "RGB", "RGBA", "I", "I;16")


def _png_compatible(image: Image.Image) -> Image.Image:
    """Convert CMYK, HSV and other modes PNG cannot hold to RGB(A)."""
    if image.mode in PNG_MODES:
        return image
    return image.convert("RGBA" if "A" in image.getbands() else "RGB")


def decode_image(
    image: Union[bytes, Image.Image],
    reference: str,
    alt_text: str = "",
    max_width: Optional[int] = None,
) -> EmbeddedImage:
    """Turn resolved image data into an EmbeddedImage.

    Images wider than ``max_width`` are scaled down, keeping the aspect
    ratio, and re-encoded as PNG.

    Args:
        image: Raw image bytes or an already decoded Pillow image
        reference: The reference string the image was resolved from
        alt_text: Alternative text from the markdown source
        max_width: Optional maximum width in pixels

    Returns:
        EmbeddedImage with dimensions filled in

    Raises:
        ImageDecodeError: If the bytes are not a readable image or the
            image cannot be re-encoded
    """
    if isinstance(image, Image.Image):
        decoded = image
        data = None
    else:
        try:
            decoded = Image.open(io.BytesIO(image))
            decoded.load()
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageDecodeError(f"Cannot decode image {reference!r}: {e}") from e
        data = image

    image_format = (decoded.format or "png").lower()

    try:
        if max_width and decoded.width > max_width:
            decoded = _png_compatible(decoded)
            scale = max_width / decoded.width
            decoded = decoded.resize((max_width, max(1, round(decoded.height * scale))))
            data = None

        if data is None:
            buffer = io.BytesIO()
            _png_compatible(decoded).save(buffer, format="PNG")
            data = buffer.getvalue()
            image_format = "png"
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Cannot re-encode image {reference!r}: {e}") from e

    return EmbeddedImage(
        reference=reference,
        alt_text=alt_text,
        data=data,
        format=image_format,
        width=decoded.width,
        height=decoded.height,
    )
