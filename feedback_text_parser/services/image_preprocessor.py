"""
Image preprocessing applied before text extraction.
Converts photos to grayscale and boosts contrast so printed and handwritten
markers stand out for the OCR service.
"""
import io
import logging
from pathlib import Path
from typing import List, Union

from PIL import Image, UnidentifiedImageError


class ImagePreprocessingError(Exception):
    """Exception raised when an image cannot be decoded or encoded."""
    pass


class ImagePreprocessor:
    """
    Grayscale and contrast enhancement using Pillow.
    """

    def __init__(self, contrast_factor: float = 1.2):
        """
        Args:
            contrast_factor: Multiplier applied to each pixel's distance from mid-gray
        """
        self.contrast_factor = contrast_factor
        self.logger = logging.getLogger(__name__)
        self._lookup_table = self._build_contrast_table(contrast_factor)

    @staticmethod
    def _build_contrast_table(factor: float) -> List[int]:
        """Map every gray level v to clamp((v - 128) * factor + 128)."""
        return [max(0, min(255, int(round((value - 128) * factor + 128)))) for value in range(256)]

    def enhance(self, image: Image.Image) -> Image.Image:
        """
        Return a grayscale, contrast-enhanced copy of an image.

        Args:
            image: Source image in any mode Pillow can convert

        Returns:
            Image in mode "L"
        """
        if image.mode in ('RGBA', 'LA') or (image.mode == 'P' and 'transparency' in image.info):
            # Flatten onto white so transparent areas don't turn black
            rgba = image.convert('RGBA')
            background = Image.new('RGB', image.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.split()[-1])
            image = background

        grayscale = image.convert('L')
        return grayscale.point(self._lookup_table)

    def preprocess_file(self, image_path: Union[str, Path]) -> bytes:
        """
        Load an image file, enhance it and encode it as PNG.

        Args:
            image_path: Path to a JPEG, PNG or WebP image

        Returns:
            bytes: PNG-encoded preprocessed image

        Raises:
            ImagePreprocessingError: If the image cannot be read or encoded
        """
        image_path = Path(image_path)
        self.logger.debug(f"Preprocessing image: {image_path.name}")

        try:
            with Image.open(image_path) as image:
                image.load()
                enhanced = self.enhance(image)
        except (UnidentifiedImageError, OSError) as e:
            raise ImagePreprocessingError(f"Unable to read image {image_path.name}: {e}") from e

        return self.to_png_bytes(enhanced)

    def to_png_bytes(self, image: Image.Image) -> bytes:
        buffer = io.BytesIO()
        try:
            image.save(buffer, format='PNG')
        except (OSError, ValueError) as e:
            raise ImagePreprocessingError(f"Unable to encode image as PNG: {e}") from e
        return buffer.getvalue()
