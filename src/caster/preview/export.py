"""Image export utilities for rendered images.

Supported formats:
    - PPM (plain-text P3, written directly)
    - PNG (8-bit via Pillow)

Example:
    >>> from src.caster.preview.canvas import Canvas
    >>> from src.caster.preview.export import canvas_to_ppm
    >>> print(canvas_to_ppm(Canvas(2, 1)), end="")
    P3 2 1 255
    0 0 0 0 0 0
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.caster.preview.canvas import Canvas
from src.caster.preview.display import process_image_for_display

# Largest channel value written to PPM files
PPM_MAX_VALUE = 255

# Lines are wrapped before reaching this many characters
PPM_LINE_LENGTH = 70


def _scale_to_ppm(image: npt.NDArray[np.float32]) -> npt.NDArray[np.uint32]:
    scaled = np.clip(image * np.float32(PPM_MAX_VALUE), 0.0, PPM_MAX_VALUE).astype(np.float32)
    # +0.5 then truncate rounds to nearest
    return (scaled + np.float32(0.5)).astype(np.uint32)


def canvas_to_ppm(canvas: Canvas) -> str:
    """Serialize a canvas as a plain PPM (P3) document.

    The header is a single line "P3 {width} {height} 255". Channel values
    follow in row-major order, scaled to [0, 255], clamped and rounded. Values
    are separated by single spaces; a line is broken before a value that
    would bring it to 70 characters or more. Rows do not start new lines.
    The document ends with a newline.

    Args:
        canvas: Canvas to serialize.

    Returns:
        The PPM text.
    """
    values = _scale_to_ppm(canvas.to_array()).reshape(-1)

    lines: list[str] = []
    current: list[str] = []
    line_len = 0
    for value in values:
        token = str(int(value))
        if not current:
            current.append(token)
            line_len = len(token)
        elif line_len + len(token) + 1 >= PPM_LINE_LENGTH:
            lines.append(" ".join(current))
            current = [token]
            line_len = len(token)
        else:
            current.append(token)
            line_len += len(token) + 1
    lines.append(" ".join(current))

    header = f"P3 {canvas.width} {canvas.height} {PPM_MAX_VALUE}"
    return header + "\n" + "\n".join(lines) + "\n"


def save_ppm(canvas: Canvas, filepath: str | Path) -> None:
    """Write a canvas to disk as a plain PPM file."""
    Path(filepath).write_text(canvas_to_ppm(canvas), encoding="ascii")


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float32 image to uint8 for display/export.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma correction value (1.0 leaves values linear).

    Returns:
        8-bit image array of shape (H, W, 3), rounded to nearest.
    """
    processed = process_image_for_display(image, gamma=gamma)
    return (processed * np.float32(PPM_MAX_VALUE) + np.float32(0.5)).astype(np.uint8)


def save_png(
    image: npt.NDArray[np.float32] | Canvas,
    filepath: str | Path,
    *,
    gamma: float = 1.0,
) -> None:
    """Save an image array or canvas as an 8-bit RGB PNG file.

    Args:
        image: Linear image array of shape (H, W, 3), or a Canvas.
        filepath: Output file path.
        gamma: Gamma correction value (1.0 leaves values linear).
    """
    if isinstance(image, Canvas):
        image = image.to_array()

    # (H, W, 3) uint8 is read as RGB
    pil_image = PILImage.fromarray(image_to_uint8(image, gamma=gamma))
    pil_image.save(filepath)
