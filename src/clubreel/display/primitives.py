"""Drawing primitives on numpy RGB frame buffers."""

from typing import Tuple
import numpy as np
from numpy.typing import NDArray

# Type aliases
Color = Tuple[int, int, int]
Buffer = NDArray[np.uint8]


def new_buffer(width: int, height: int, color: Color = (0, 0, 0)) -> Buffer:
    buffer = np.zeros((height, width, 3), dtype=np.uint8)
    buffer[:, :] = color
    return buffer


def clear(buffer: Buffer, color: Color = (0, 0, 0)) -> None:
    """Clear buffer to a solid color."""
    buffer[:, :] = color


def draw_rect(
    buffer: Buffer,
    x: int,
    y: int,
    width: int,
    height: int,
    color: Color,
    filled: bool = True,
    thickness: int = 1,
) -> None:
    """Draw a rectangle, clipped to the buffer.

    Args:
        buffer: Target numpy array (height, width, 3)
        x: Left edge x coordinate (may be off-screen)
        y: Top edge y coordinate
        width: Rectangle width
        height: Rectangle height
        color: RGB color tuple
        filled: If True, fill rectangle; if False, draw outline only
        thickness: Outline thickness (when filled=False)
    """
    h, w = buffer.shape[:2]

    x1 = max(0, min(x, w))
    y1 = max(0, min(y, h))
    x2 = max(0, min(x + width, w))
    y2 = max(0, min(y + height, h))
    if x2 <= x1 or y2 <= y1:
        return

    if filled:
        buffer[y1:y2, x1:x2] = color
        return

    t = max(1, thickness)
    # Only draw the edges that are actually on screen
    if y >= 0:
        buffer[y1:min(y1 + t, y2), x1:x2] = color
    if y + height <= h:
        buffer[max(y2 - t, y1):y2, x1:x2] = color
    if x >= 0:
        buffer[y1:y2, x1:min(x1 + t, x2)] = color
    if x + width <= w:
        buffer[y1:y2, max(x2 - t, x1):x2] = color


def draw_triangle_down(buffer: Buffer, cx: int, top: int, half_width: int, height: int, color: Color) -> None:
    """Filled isosceles triangle pointing down, apex at (cx, top + height)."""
    h, w = buffer.shape[:2]
    for row in range(height):
        y = top + row
        if not 0 <= y < h:
            continue
        span = int(half_width * (1 - row / max(height, 1)))
        x1 = max(0, cx - span)
        x2 = min(w, cx + span + 1)
        if x2 > x1:
            buffer[y, x1:x2] = color


def draw_image(
    buffer: Buffer,
    image: Buffer,
    x: int,
    y: int,
    alpha: float = 1.0,
) -> None:
    """Draw an image onto the buffer with optional alpha blending.

    Args:
        buffer: Target numpy array (height, width, 3)
        image: Source image array (height, width, 3 or 4)
        x: Top-left x coordinate
        y: Top-left y coordinate
        alpha: Global alpha multiplier (0.0 to 1.0)
    """
    buf_h, buf_w = buffer.shape[:2]
    img_h, img_w = image.shape[:2]

    src_x1 = max(0, -x)
    src_y1 = max(0, -y)
    src_x2 = min(img_w, buf_w - x)
    src_y2 = min(img_h, buf_h - y)

    dst_x1 = max(0, x)
    dst_y1 = max(0, y)
    dst_x2 = dst_x1 + (src_x2 - src_x1)
    dst_y2 = dst_y1 + (src_y2 - src_y1)

    if src_x2 <= src_x1 or src_y2 <= src_y1:
        return

    src_region = image[src_y1:src_y2, src_x1:src_x2]

    if alpha >= 1.0 and image.shape[2] == 3:
        buffer[dst_y1:dst_y2, dst_x1:dst_x2] = src_region
        return

    dst_region = buffer[dst_y1:dst_y2, dst_x1:dst_x2]
    if image.shape[2] == 4:
        img_alpha = (src_region[:, :, 3:4] / 255.0) * alpha
        src_rgb = src_region[:, :, :3]
    else:
        img_alpha = alpha
        src_rgb = src_region
    buffer[dst_y1:dst_y2, dst_x1:dst_x2] = (src_rgb * img_alpha + dst_region * (1 - img_alpha)).astype(np.uint8)


def dim(buffer: Buffer, factor: float) -> None:
    """Darken the whole buffer in place (overlay backdrop)."""
    buffer[:] = (buffer.astype(np.float32) * factor).astype(np.uint8)
