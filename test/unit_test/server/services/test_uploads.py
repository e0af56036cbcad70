from __future__ import annotations

from io import BytesIO
from pathlib import Path

import pytest
from starlette.datastructures import Headers, UploadFile

from portfolio_cms.server.services.uploads import UploadError, save_image

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
WEBP_BYTES = b"RIFF\x24\x00\x00\x00WEBPVP8 " + b"\x00" * 32


def _upload(data: bytes, content_type: str, filename: str = "picture.png") -> UploadFile:
    return UploadFile(BytesIO(data), filename=filename, headers=Headers({"content-type": content_type}))


async def test_png_is_stored(tmp_path: Path):
    result = await save_image(_upload(PNG_BYTES, "image/png"), upload_dir=str(tmp_path))

    assert result.filename.endswith(".png")
    assert result.url == f"/uploads/images/{result.filename}"
    assert result.size == len(PNG_BYTES)
    assert result.type == "image/png"
    assert (tmp_path / "images" / result.filename).read_bytes() == PNG_BYTES


async def test_webp_requires_webp_marker(tmp_path: Path):
    result = await save_image(_upload(WEBP_BYTES, "image/webp", "a.webp"), upload_dir=str(tmp_path))
    assert result.filename.endswith(".webp")

    with pytest.raises(UploadError):
        await save_image(_upload(b"RIFF\x00\x00\x00\x00WAVEfmt " + b"\x00" * 8, "image/webp"), upload_dir=str(tmp_path))


async def test_jpg_alias_reports_jpeg(tmp_path: Path):
    result = await save_image(_upload(b"\xff\xd8\xff\xe0" + b"\x00" * 16, "image/jpg", "a.jpg"), upload_dir=str(tmp_path))
    assert result.type == "image/jpeg"
    assert result.filename.endswith(".jpg")


async def test_unsupported_type(tmp_path: Path):
    with pytest.raises(UploadError) as exc_info:
        await save_image(_upload(b"%PDF-1.7", "application/pdf"), upload_dir=str(tmp_path))
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid file type. Only JPEG, PNG, WebP, and GIF are allowed."


async def test_content_must_match_declared_type(tmp_path: Path):
    with pytest.raises(UploadError) as exc_info:
        await save_image(_upload(b"GIF89a" + b"\x00" * 10, "image/png"), upload_dir=str(tmp_path))
    assert exc_info.value.status_code == 400
    assert not (tmp_path / "images").exists()


async def test_empty_file(tmp_path: Path):
    with pytest.raises(UploadError) as exc_info:
        await save_image(_upload(b"", "image/png"), upload_dir=str(tmp_path))
    assert exc_info.value.message == "No file provided"


async def test_too_large(tmp_path: Path):
    with pytest.raises(UploadError) as exc_info:
        await save_image(_upload(PNG_BYTES, "image/png"), upload_dir=str(tmp_path), max_bytes=16)
    assert exc_info.value.status_code == 413
