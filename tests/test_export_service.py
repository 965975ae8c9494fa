"""
Tests for project archives and image conversion
"""
import io
import zipfile

import pytest
from PIL import Image

from conftest import make_code
from services.export_service import ExportService


@pytest.fixture
def export_service():
    return ExportService()


@pytest.fixture
def png_bytes():
    output = io.BytesIO()
    Image.new("RGBA", (8, 8), (255, 0, 0, 128)).save(output, format="PNG")
    return output.getvalue()


class TestProjectArchive:
    def test_archive_contents(self, export_service):
        code = make_code("v1")

        archive = export_service.build_project_archive(code, "My Bakery!")

        with zipfile.ZipFile(io.BytesIO(archive)) as zf:
            names = sorted(zf.namelist())
            assert names == [
                "my-bakery/preview.html",
                "my-bakery/src/index.html",
                "my-bakery/src/main.js",
                "my-bakery/src/styles.css",
            ]
            assert zf.read("my-bakery/preview.html").decode() == code.full_code
            assert zf.read("my-bakery/src/index.html").decode() == "<p>v1</p>"

    @pytest.mark.parametrize("name, expected", [
        ("My Generated App", "my-generated-app"),
        ("  Café & Bar ", "caf-bar"),
        ("!!!", "project"),
    ])
    def test_archive_name(self, export_service, name, expected):
        assert export_service.get_archive_name(name) == expected


class TestImageConversion:
    def test_png_passthrough(self, export_service, png_bytes):
        assert export_service.convert_image(png_bytes, "PNG") == png_bytes

    def test_jpeg_drops_alpha(self, export_service, png_bytes):
        converted = export_service.convert_image(png_bytes, "jpg")
        with Image.open(io.BytesIO(converted)) as img:
            assert img.format == "JPEG"
            assert img.mode == "RGB"

    def test_webp(self, export_service, png_bytes):
        converted = export_service.convert_image(png_bytes, "webp")
        with Image.open(io.BytesIO(converted)) as img:
            assert img.format == "WEBP"

    def test_unsupported_format(self, export_service, png_bytes):
        with pytest.raises(ValueError):
            export_service.convert_image(png_bytes, "svg")

    def test_content_types(self, export_service):
        assert export_service.get_content_type("JPEG") == "image/jpeg"
        assert export_service.get_content_type("zip") == "application/zip"
        assert export_service.get_content_type("bmp") == "application/octet-stream"
