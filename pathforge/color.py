"""
Color output: turning accumulated sample sums into 8-bit pixels.

The camera hands each pixel's summed linear color and the sample count
to a ColorSink, in scanline order. Sinks own averaging, gamma
correction, clamping, and serialization.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO, Tuple, Union
import math

import numpy as np
from PIL import Image as PILImage

from .vec3 import Color
from .interval import Interval

INTENSITY = Interval(0.000, 0.999)


def linear_to_gamma(linear_component: float) -> float:
    """Gamma 2 transform: the square root of a linear intensity."""
    if linear_component > 0:
        return math.sqrt(linear_component)
    return 0.0


def to_rgb_bytes(pixel_color: Color, samples_per_pixel: int) -> Tuple[int, int, int]:
    """Average, gamma-correct, clamp and quantize a summed pixel color.

    Args:
        pixel_color: Sum of all sample colors for the pixel
        samples_per_pixel: Number of samples in the sum

    Returns:
        (r, g, b) integers in [0, 255]
    """
    scale = 1.0 / samples_per_pixel
    return tuple(
        int(256 * INTENSITY.clamp(linear_to_gamma(c * scale)))
        for c in pixel_color
    )


class ColorSink(ABC):
    """Receives finished pixels from the camera in scanline order."""

    def __init__(self):
        self.width = 0
        self.height = 0
        self._written = 0
        self._started = False

    def begin(self, width: int, height: int) -> None:
        """Start a new image of the given size."""
        self.width = width
        self.height = height
        self._written = 0
        self._started = True
        self._on_begin()

    def write_color(self, pixel_color: Color, samples_per_pixel: int) -> None:
        """Accept the next pixel (left to right, top to bottom)."""
        if not self._started:
            raise RuntimeError("write_color() called before begin()")
        if self._written >= self.width * self.height:
            raise RuntimeError(
                f"image is {self.width}x{self.height}; received more than {self.width * self.height} pixels"
            )
        index = self._written
        self._written += 1
        self._on_pixel(index, to_rgb_bytes(pixel_color, samples_per_pixel))

    def finish(self) -> None:
        """Called after the last pixel."""
        self._started = False
        self._on_finish()

    @property
    def pixels_written(self) -> int:
        return self._written

    def _on_begin(self) -> None:
        pass

    @abstractmethod
    def _on_pixel(self, index: int, rgb: Tuple[int, int, int]) -> None:
        pass

    def _on_finish(self) -> None:
        pass


class PPMWriter(ColorSink):
    """Streams a plain-text (P3) PPM image to a text stream."""

    def __init__(self, stream: TextIO):
        super().__init__()
        self.stream = stream

    def _on_begin(self) -> None:
        self.stream.write(f"P3\n{self.width} {self.height}\n255\n")

    def _on_pixel(self, index: int, rgb: Tuple[int, int, int]) -> None:
        self.stream.write(f"{rgb[0]} {rgb[1]} {rgb[2]}\n")

    def _on_finish(self) -> None:
        self.stream.flush()


class ImageBuffer(ColorSink):
    """Collects pixels into an in-memory 8-bit RGB array."""

    def __init__(self):
        super().__init__()
        self.image: Optional[np.ndarray] = None

    def _on_begin(self) -> None:
        self.image = np.zeros((self.height, self.width, 3), dtype=np.uint8)

    def _on_pixel(self, index: int, rgb: Tuple[int, int, int]) -> None:
        row, col = divmod(index, self.width)
        self.image[row, col] = rgb

    @staticmethod
    def supports(filename: Union[str, Path]) -> bool:
        """True if Pillow can write an image with this file extension."""
        image_format = PILImage.registered_extensions().get(Path(filename).suffix.lower())
        return image_format is not None and image_format in PILImage.SAVE

    def save(self, filename: Union[str, Path]) -> None:
        """Save image to file (extension determines format).

        Args:
            filename: Output filename, e.g. render.png or render.ppm
        """
        if self.image is None:
            raise RuntimeError("nothing has been rendered into this buffer")
        PILImage.fromarray(self.image, 'RGB').save(str(filename))
