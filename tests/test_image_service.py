"""
Tests for identity-document photo intake
"""

import base64
import random
from io import BytesIO
from unittest.mock import patch

import pytest
from PIL import Image

from voter_desk.services.exceptions import ImageTooLargeError, ValidationError
from voter_desk.services.image_service import (
    DATA_URL_PREFIX,
    MIN_WIDTH,
    ImageIntakeService,
    decode_data_url,
    download_filename,
)


def _decoded(data_url: str) -> Image.Image:
    return Image.open(BytesIO(base64.b64decode(data_url[len(DATA_URL_PREFIX):])))


def _noise_jpeg(size=(1600, 1000)) -> bytes:
    """A high-detail photo that does not compress well"""
    width, height = size
    pixels = random.Random(0).randbytes(width * height * 3)
    buffer = BytesIO()
    Image.frombytes('RGB', size, pixels).save(buffer, format='JPEG', quality=95)
    return buffer.getvalue()


@pytest.fixture
def service():
    return ImageIntakeService(max_width=600, quality=70, char_limit=50000)


class TestEncode:

    def test_wide_photo_is_scaled_to_max_width(self, service, make_image):
        encoded = service.encode(make_image((1200, 800)))

        assert encoded.startswith(DATA_URL_PREFIX)
        image = _decoded(encoded)
        assert image.format == 'JPEG'
        assert image.size == (600, 400)

    def test_small_photo_is_not_enlarged(self, service, make_image):
        assert _decoded(service.encode(make_image((300, 200)))).size == (300, 200)

    def test_transparent_photo_is_flattened(self, service, make_image):
        encoded = service.encode(make_image((100, 100), mode='RGBA', color=(0, 0, 0, 0)))
        assert _decoded(encoded).mode == 'RGB'

    def test_exif_orientation_is_applied(self, service, make_image):
        exif = Image.Exif()
        exif[0x0112] = 6
        photo = make_image((200, 100), fmt='JPEG', exif=exif)

        assert _decoded(service.encode(photo)).size == (100, 200)

    def test_unreadable_bytes(self, service):
        with pytest.raises(ValidationError):
            service.encode(b'not an image')
        with pytest.raises(ValidationError):
            service.encode(b'')

    def test_decompression_bomb_is_rejected(self, service, image_bytes):
        with patch('voter_desk.services.image_service.Image.open',
                   side_effect=Image.DecompressionBombError('too many pixels')):
            with pytest.raises(ValidationError):
                service.encode(image_bytes)

    def test_detailed_photo_is_reduced_to_fit(self, service):
        encoded = service.encode(_noise_jpeg())

        assert len(encoded) <= 50000
        image = _decoded(encoded)
        assert MIN_WIDTH <= image.width <= 600

    def test_photo_too_detailed_for_any_rendition(self):
        tiny = ImageIntakeService(max_width=600, quality=70, char_limit=500)

        with pytest.raises(ImageTooLargeError) as excinfo:
            tiny.encode(_noise_jpeg((800, 500)))

        assert excinfo.value.limit == 500
        assert excinfo.value.length > 500


class TestSizeCeiling:

    def test_at_limit_is_accepted(self, service):
        service.check_size('x' * 50000)
        service.check_size('')

    def test_over_limit_is_rejected(self, service):
        with pytest.raises(ImageTooLargeError) as exc_info:
            service.check_size('x' * 50001)
        assert exc_info.value.length == 50001
        assert exc_info.value.limit == 50000

    def test_limit_from_app_config(self, app):
        app.config['IMAGE_CHAR_LIMIT'] = 10
        with app.app_context():
            with pytest.raises(ImageTooLargeError):
                ImageIntakeService().check_size('x' * 11)


class TestHelpers:

    def test_decode_data_url(self, service, image_bytes):
        mimetype, data = decode_data_url(service.encode(image_bytes))
        assert mimetype == 'image/jpeg'
        assert data[:2] == b'\xff\xd8'

    def test_decode_rejects_other_values(self):
        with pytest.raises(ValidationError):
            decode_data_url('https://example.com/photo.jpg')

    def test_download_filename(self):
        assert download_filename('Ram  Kumar') == 'Aadhaar_Ram_Kumar.jpg'
        assert download_filename('') == 'Aadhaar_Voter.jpg'
