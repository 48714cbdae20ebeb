"""Conversion between float RGB images and packed 32-bit pixel buffers.

The renderer's output buffer holds one unsigned 32-bit integer per pixel,
row-major, packed as ``(A << 24) | (B << 16) | (G << 8) | R`` with alpha fixed
at 255. On little-endian hosts the bytes of such a buffer read R, G, B, A,
which is what RGBA texture uploads and Pillow expect.

Channel conversion is ``int(component * 255 + 0.5)`` after clamping to [0, 1].
NaN components become 0 and +inf becomes 1, so numeric faults in shading never
crash packing.

Example:
    >>> import numpy as np
    >>> from src.raytracer.core.pixels import pack_abgr
    >>> hex(int(pack_abgr(np.array([1.0, 0.0, 0.0]))))
    '0xff0000ff'
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

ALPHA_OPAQUE = np.uint32(0xFF000000)


def to_channel_bytes(colors: npt.ArrayLike) -> npt.NDArray[np.uint32]:
    """Quantize float color components to [0, 255] integers.

    Args:
        colors: Array of float components, any shape.

    Returns:
        Array of the same shape with dtype uint32.
    """
    values = np.asarray(colors, dtype=np.float32)
    values = np.nan_to_num(values, nan=0.0, posinf=1.0, neginf=0.0)
    values = np.clip(values, 0.0, 1.0)
    return (values * 255.0 + 0.5).astype(np.uint32)


def pack_abgr(
    colors: npt.ArrayLike,
    out: npt.NDArray[np.uint32] | None = None,
) -> npt.NDArray[np.uint32]:
    """Pack RGB colors into ABGR 32-bit integers with full alpha.

    Args:
        colors: Float array whose last axis holds (r, g, b).
        out: Optional destination array shaped like ``colors[..., 0]``. When
            given, the result is written in place and ``out`` is returned.

    Returns:
        Array of packed pixels shaped like ``colors[..., 0]``.

    Raises:
        ValueError: If the last axis of colors is not of size 3.
    """
    channels = to_channel_bytes(colors)
    if channels.shape[-1] != 3:
        raise ValueError(f"Expected RGB colors in the last axis, got shape {channels.shape}")

    packed = (
        ALPHA_OPAQUE
        | (channels[..., 2] << np.uint32(16))
        | (channels[..., 1] << np.uint32(8))
        | channels[..., 0]
    )

    if out is None:
        return packed.astype(np.uint32)

    out[...] = packed
    return out


def unpack_abgr(
    buffer: npt.NDArray[np.uint32],
    width: int,
    height: int,
) -> npt.NDArray[np.float32]:
    """Unpack an ABGR pixel buffer into a float RGB image.

    Args:
        buffer: Packed pixels, ``width * height`` entries, row-major.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        Float32 array of shape (height, width, 3) with values in [0, 1].
    """
    pixels = np.asarray(buffer, dtype=np.uint32).reshape(height, width)
    rgb = np.stack(
        [pixels & 0xFF, (pixels >> 8) & 0xFF, (pixels >> 16) & 0xFF],
        axis=-1,
    )
    return (rgb.astype(np.float32) / 255.0).astype(np.float32)


def buffer_to_rgba(
    buffer: npt.NDArray[np.uint32],
    width: int,
    height: int,
) -> npt.NDArray[np.uint8]:
    """Split an ABGR pixel buffer into an (height, width, 4) RGBA byte image."""
    pixels = np.asarray(buffer, dtype=np.uint32).reshape(height, width)
    rgba = np.stack(
        [
            pixels & 0xFF,
            (pixels >> 8) & 0xFF,
            (pixels >> 16) & 0xFF,
            (pixels >> 24) & 0xFF,
        ],
        axis=-1,
    )
    return rgba.astype(np.uint8)
