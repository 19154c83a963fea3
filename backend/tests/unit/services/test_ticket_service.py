"""
Unit Tests for QR ticket generation
"""
import base64
import io

from PIL import Image

from velonix.services.ticket_service import PNG_DATA_URI_PREFIX, generate_ticket_png, to_data_uri


class TestTicket:

    def test_png_output(self):
        png = generate_ticket_png("VEL-ABC123XYZ")

        image = Image.open(io.BytesIO(png))
        assert image.format == "PNG"
        assert image.size[0] == image.size[1]

    def test_box_size_scales_image(self):
        small = Image.open(io.BytesIO(generate_ticket_png("VEL-ABC123XYZ", box_size=4)))
        large = Image.open(io.BytesIO(generate_ticket_png("VEL-ABC123XYZ", box_size=8)))

        assert large.size[0] == 2 * small.size[0]

    def test_same_id_same_image(self):
        assert generate_ticket_png("VEL-ABC123XYZ") == generate_ticket_png("VEL-ABC123XYZ")

    def test_data_uri(self):
        png = generate_ticket_png("VEL-ABC123XYZ")

        uri = to_data_uri(png)

        assert uri.startswith(PNG_DATA_URI_PREFIX)
        assert base64.b64decode(uri[len(PNG_DATA_URI_PREFIX):]) == png
