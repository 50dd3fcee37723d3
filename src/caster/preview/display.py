"""Matplotlib-based preview display for rendered images.

Rendered colors are linear and unclamped; they are clamped to [0, 1] and
optionally gamma corrected before display or export.

Example:
    >>> from src.caster.preview.display import show_preview
    >>> from src.caster.core.integrator import render_image
    >>>
    >>> image = render_image(world, camera)
    >>> show_preview(image, gamma=2.2)
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Apply gamma correction for display.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma value (2.2 for sRGB-like output, 1.0 for none).

    Returns:
        Gamma corrected image.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"Gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return image

    # Clamp first: negative values have no real power
    image = np.clip(image, 0.0, 1.0)
    result = np.power(image, 1.0 / gamma)

    return result.astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    gamma: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Clamp an image to [0, 1] and apply gamma correction.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma correction value (1.0 leaves values linear).

    Returns:
        Float32 image in [0, 1], ready for display.

    Raises:
        ValueError: If the image is not (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected image of shape (H, W, 3), got {image.shape}")

    result = np.clip(image, 0.0, 1.0)
    result = apply_gamma(result, gamma)

    return result.astype(np.float32)


def show_preview(
    image: npt.NDArray[np.float32],
    *,
    gamma: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4),
    block: bool = True,
) -> None:
    """Display a rendered image in a Matplotlib figure.

    Args:
        image: Linear image array of shape (H, W, 3).
        gamma: Gamma correction value.
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(image, gamma=gamma)

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = image.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
