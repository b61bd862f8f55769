"""
Identity-document photo intake: downscale, re-encode, and bound the size of
the data URL stored in the roll
"""
import base64
import binascii
import re
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from voter_desk.services.base_service import BaseService
from voter_desk.services.exceptions import ImageTooLargeError, ValidationError
from voter_desk.shared import messages


DEFAULT_MAX_WIDTH = 600
DEFAULT_JPEG_QUALITY = 70
# Spreadsheet cells hold at most 50,000 characters
DEFAULT_CHAR_LIMIT = 50000

# Fallbacks when a photo does not fit the ceiling
MIN_JPEG_QUALITY = 30
QUALITY_STEP = 10
MIN_WIDTH = 240
WIDTH_STEP = 0.8

DATA_URL_PREFIX = 'data:image/jpeg;base64,'
_DATA_URL = re.compile(r'^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.*)$', re.DOTALL)


class ImageIntakeService(BaseService):
    """Turns an uploaded or captured photo into a storable data URL"""

    def __init__(self, max_width: int = None, quality: int = None, char_limit: int = None):
        super().__init__()
        self.max_width = max_width or self.config_value('IMAGE_MAX_WIDTH', DEFAULT_MAX_WIDTH)
        self.quality = quality or self.config_value('IMAGE_JPEG_QUALITY', DEFAULT_JPEG_QUALITY)
        self.char_limit = char_limit or self.config_value('IMAGE_CHAR_LIMIT', DEFAULT_CHAR_LIMIT)

    def load(self, image_bytes: bytes) -> Image.Image:
        """Open image bytes, upright according to EXIF orientation"""
        if not image_bytes:
            raise ValidationError(messages.IMAGE_UNREADABLE)
        try:
            image = Image.open(BytesIO(image_bytes))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            self.logger.warning(f"Rejected unreadable image: {e}")
            raise ValidationError(messages.IMAGE_UNREADABLE) from e
        return ImageOps.exif_transpose(image)

    def downscale(self, image: Image.Image, width: int = None) -> Image.Image:
        """Shrink to the given (default: maximum) width, keeping the aspect ratio; never enlarges"""
        width = width or self.max_width
        if image.width <= width:
            return image
        height = max(1, round(image.height * width / image.width))
        return image.resize((width, height), Image.Resampling.LANCZOS)

    def encode(self, image_bytes: bytes) -> str:
        """
        Downscale and re-encode as a JPEG data URL no longer than `char_limit`.

        Quality is stepped down to MIN_JPEG_QUALITY first, then the width is
        reduced until the result fits or MIN_WIDTH is reached.

        Raises:
            ValidationError: the bytes are not a readable image
            ImageTooLargeError: even the smallest rendition is over the limit
        """
        source = self.load(image_bytes)
        if source.mode != 'RGB':
            source = source.convert('RGB')

        width = min(source.width, self.max_width)
        quality = self.quality
        while True:
            image = self.downscale(source, width)
            encoded = self._to_data_url(image, quality)
            if len(encoded) <= self.char_limit:
                self.logger.info(
                    f"Encoded {image.width}x{image.height} photo at quality {quality} "
                    f"as {len(encoded)} characters"
                )
                return encoded

            if quality - QUALITY_STEP >= MIN_JPEG_QUALITY:
                quality -= QUALITY_STEP
            elif int(width * WIDTH_STEP) >= MIN_WIDTH:
                width = int(width * WIDTH_STEP)
            else:
                self.logger.warning(
                    f"Photo still {len(encoded)} characters at {image.width}px, quality {quality}"
                )
                raise ImageTooLargeError(len(encoded), self.char_limit)

    @staticmethod
    def _to_data_url(image: Image.Image, quality: int) -> str:
        buffer = BytesIO()
        image.save(buffer, format='JPEG', quality=quality, optimize=True)
        return DATA_URL_PREFIX + base64.b64encode(buffer.getvalue()).decode('ascii')

    def check_size(self, encoded: str) -> None:
        """Reject an encoded photo longer than the store's per-cell ceiling"""
        if encoded and len(encoded) > self.char_limit:
            raise ImageTooLargeError(len(encoded), self.char_limit)


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into its MIME type and raw bytes"""
    match = _DATA_URL.match(data_url or '')
    if not match:
        raise ValidationError("Not a base64 data URL")
    try:
        return match.group('mime'), base64.b64decode(match.group('data'), validate=False)
    except binascii.Error as e:
        raise ValidationError(f"Invalid base64 image data: {e}") from e


def download_filename(voter_name: str) -> str:
    name = re.sub(r'\s+', '_', (voter_name or '').strip()) or 'Voter'
    return f"Aadhaar_{name}.jpg"
