"""Helpers for turning uploaded photos into model-ready data URIs."""

from __future__ import annotations

import base64
import binascii
import mimetypes
from dataclasses import dataclass

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

DEFAULT_IMAGE_MIME = "image/jpeg"
DATA_URI_PREFIX = "data:"


@dataclass(slots=True)
class EncodedImage:
    """An uploaded photo ready to hand to the vision model."""

    filename: str
    mime_type: str
    data_uri: str


def build_data_uri(image_bytes: bytes, mime_type: str | None = None) -> str:
    mime = (mime_type or DEFAULT_IMAGE_MIME).strip() or DEFAULT_IMAGE_MIME
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def encode_image_upload(image_file: FileStorage) -> EncodedImage:
    """Read a multipart upload and return it as a base64 data URI."""

    if image_file.filename == "":
        raise ValueError("empty filename")

    filename = secure_filename(image_file.filename or "photo") or "photo"
    mime_type = image_file.mimetype or mimetypes.guess_type(filename)[0]
    if mime_type and not mime_type.startswith("image/"):
        raise ValueError(f"unsupported content type {mime_type!r}")

    image_bytes = image_file.read()
    if not image_bytes:
        raise ValueError("uploaded file was empty")

    mime_type = mime_type or DEFAULT_IMAGE_MIME
    return EncodedImage(
        filename=filename,
        mime_type=mime_type,
        data_uri=build_data_uri(image_bytes, mime_type),
    )


def coerce_data_uri(image_base64: str) -> str:
    """Accept either a full data URI or bare base64 text.

    Bare base64 is checked for validity and assumed to be a JPEG.
    """

    candidate = image_base64.strip()
    if candidate.startswith(DATA_URI_PREFIX):
        header, _, payload = candidate.partition(",")
        if not payload or ";base64" not in header:
            raise ValueError("imageBase64 must be a base64 data URI")
        return candidate

    try:
        image_bytes = base64.b64decode(candidate, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("imageBase64 is not valid base64") from exc
    if not image_bytes:
        raise ValueError("imageBase64 decoded to an empty image")
    return build_data_uri(image_bytes)
