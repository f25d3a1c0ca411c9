"""Tests for upload decoding and download preparation."""

import base64

import pytest

from proheadshot.core.errors import ImageRejected
from proheadshot.core.image_io import (
    ImageArtifact,
    build_download,
    decode_upload,
    parse_data_uri,
)


def test_decode_upload_encodes_base64():
    image = decode_upload(b"\xff\xd8abc", "image/jpeg", "me.jpg")

    assert image.mime_type == "image/jpeg"
    assert base64.b64decode(image.data) == b"\xff\xd8abc"
    assert image.data_url.startswith("data:image/jpeg;base64,")


def test_decode_upload_guesses_type_from_filename():
    assert decode_upload(b"png", None, "me.png").mime_type == "image/png"


def test_decode_upload_rejects_non_image():
    with pytest.raises(ImageRejected):
        decode_upload(b"%PDF", "application/pdf", "cv.pdf")


def test_decode_upload_rejects_empty_file():
    with pytest.raises(ImageRejected):
        decode_upload(b"", "image/png", "empty.png")


def test_parse_data_uri():
    data = base64.b64encode(b"webp-bytes").decode()

    image = parse_data_uri(f"data:image/webp;base64,{data}")

    assert image.mime_type == "image/webp"
    assert image.data == data


@pytest.mark.parametrize(
    "uri",
    [
        "not a uri",
        "data:text/plain;base64,aGVsbG8=",
        "data:image/png,rawbytes",
        "data:image/png;base64,@@@",
    ],
)
def test_parse_data_uri_rejects_invalid(uri):
    with pytest.raises(ImageRejected):
        parse_data_uri(uri)


def test_build_download():
    artifact = ImageArtifact(
        data_url="data:image/png;base64," + base64.b64encode(b"PNG").decode(),
        mime_type="image/png",
        created_at=1700000000.5,
    )

    content, filename, mime_type = build_download(artifact)

    assert content == b"PNG"
    assert filename == "professional-headshot-1700000000500.png"
    assert mime_type == "image/png"
