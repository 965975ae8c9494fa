"""
Export service for SiteCraft: downloadable project archives and preview
screenshots in other image formats.
"""
import io
import re
import zipfile
from typing import Dict, NamedTuple
import logging

from PIL import Image

from models.generation import GeneratedCode
from services.code_utils import project_files

logger = logging.getLogger(__name__)


class ImageFormat(NamedTuple):
    pil_name: str
    content_type: str
    # JPEG has no alpha channel
    needs_rgb: bool = False


IMAGE_FORMATS: Dict[str, ImageFormat] = {
    "png": ImageFormat("PNG", "image/png"),
    "jpg": ImageFormat("JPEG", "image/jpeg", needs_rgb=True),
    "jpeg": ImageFormat("JPEG", "image/jpeg", needs_rgb=True),
    "webp": ImageFormat("WEBP", "image/webp"),
}
ARCHIVE_CONTENT_TYPE = "application/zip"


def flatten_onto_white(img: Image.Image) -> Image.Image:
    """Composite transparent pixels onto a white background, returning an RGB image."""
    if img.mode in ("RGBA", "LA"):
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.getchannel("A"))
        return background
    return img if img.mode == "RGB" else img.convert("RGB")


class ExportService:
    @property
    def supported_formats(self):
        return IMAGE_FORMATS.keys()

    def build_project_archive(self, code: GeneratedCode, project_name: str = "My Generated App") -> bytes:
        """
        Zip the generated project: the source files plus preview.html, the
        standalone document shown in the live preview. Everything sits in a
        folder named after the project.
        """
        files = project_files(code)
        files["preview.html"] = code.full_code

        root = self.get_archive_name(project_name)
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for path, content in files.items():
                archive.writestr(f"{root}/{path}", content)

        logger.info(f"Built archive '{root}.zip' with {len(files)} files")
        return buffer.getvalue()

    def get_archive_name(self, project_name: str) -> str:
        slug = re.sub(r"[^a-z0-9]+", "-", project_name.lower()).strip("-")
        return slug or "project"

    def convert_image(self, png_bytes: bytes, format: str, quality: int = 95) -> bytes:
        """Re-encode a PNG screenshot. PNG input is returned untouched."""
        target = IMAGE_FORMATS.get(format.lower())
        if target is None:
            raise ValueError(f"Unsupported format: {format}")
        if target.pil_name == "PNG":
            return png_bytes

        try:
            with Image.open(io.BytesIO(png_bytes)) as img:
                if target.needs_rgb:
                    img = flatten_onto_white(img)
                output = io.BytesIO()
                img.save(output, format=target.pil_name, quality=quality)
                return output.getvalue()
        except OSError as e:
            logger.error(f"Error converting screenshot to {format}: {e}")
            raise

    def get_content_type(self, format: str) -> str:
        format = format.lower()
        if format == "zip":
            return ARCHIVE_CONTENT_TYPE
        target = IMAGE_FORMATS.get(format)
        return target.content_type if target else "application/octet-stream"
