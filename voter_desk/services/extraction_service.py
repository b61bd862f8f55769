"""
Best-effort extraction of identity number and date of birth from a document photo
"""
import re
from io import BytesIO

import pytesseract
from PIL import Image, ImageOps, UnidentifiedImageError

from voter_desk.services.base_service import BaseService
from voter_desk.services.exceptions import ExtractionError
from voter_desk.shared.date_utils import DATE_TOKEN, normalize_dob


DEFAULT_LANGUAGES = 'eng+hin'

# 12 digits, often printed in groups of four; never starts with 0 or 1
_IDENTITY_NUMBER = re.compile(r'(?<!\d)([2-9]\d{3})[ \t]?(\d{4})[ \t]?(\d{4})(?!\d)')
_DOB_LABEL = re.compile(r'(?:DOB|D\.O\.B|Date of Birth|जन्म तिथि)\s*[:/]?\s*', re.IGNORECASE)


def parse_identity_number(text: str) -> str:
    match = _IDENTITY_NUMBER.search(text or '')
    return ''.join(match.groups()) if match else ''


def parse_dob(text: str) -> str:
    """Date after a DOB label if present, otherwise the first date in the text"""
    text = text or ''
    label = _DOB_LABEL.search(text)
    if label:
        match = DATE_TOKEN.search(text, label.end())
        if match:
            dob = normalize_dob(match.group(1))
            if dob:
                return dob

    for match in DATE_TOKEN.finditer(text):
        dob = normalize_dob(match.group(1))
        if dob:
            return dob
    return ''


def parse_fields(text: str) -> dict:
    """Fields found in OCR text; keys are omitted when nothing was found"""
    fields = {}
    identity_number = parse_identity_number(text)
    if identity_number:
        fields['aadhaar'] = identity_number
    dob = parse_dob(text)
    if dob:
        fields['dob'] = dob
    return fields


class FieldExtractionService(BaseService):
    """Reads the identity number and date of birth off an identity card photo"""

    def __init__(self, languages: str = None, enabled: bool = None):
        super().__init__()
        self.languages = languages or self.config_value('OCR_LANGUAGES', DEFAULT_LANGUAGES)
        self.enabled = enabled if enabled is not None else self.config_value('OCR_ENABLED', True)
        self.tesseract_config = '--oem 3 --psm 6'

    def read_text(self, image: Image.Image) -> str:
        """OCR an image after grayscale and contrast enhancement"""
        image = ImageOps.grayscale(image)
        image = ImageOps.autocontrast(image)
        text = pytesseract.image_to_string(image, lang=self.languages, config=self.tesseract_config)
        return text.strip()

    def extract_fields(self, image_bytes: bytes) -> dict:
        """
        Extract `aadhaar` and `dob` from a photo.

        Raises:
            ExtractionError: extraction is disabled, the image cannot be read,
                OCR fails, or neither field is found
        """
        if not self.enabled:
            raise ExtractionError("Document field extraction is disabled")

        try:
            image = ImageOps.exif_transpose(Image.open(BytesIO(image_bytes)))
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise ExtractionError(f"Unreadable image: {e}") from e

        try:
            text = self.read_text(image)
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as e:
            self.logger.error(f"OCR failed: {e}")
            raise ExtractionError(f"OCR failed: {e}") from e

        fields = parse_fields(text)
        if not fields:
            self.logger.info("No identity fields found in photo")
            raise ExtractionError("No identity number or date of birth found")

        self.logger.info(f"Extracted fields from photo: {', '.join(sorted(fields))}")
        return fields
