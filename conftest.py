import base64
from io import BytesIO

import pytest
from PIL import Image


def png_bytes(size=(200, 100), color=(255, 0, 0, 255)) -> bytes:
    buf = BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return buf.getvalue()


def data_uri(size=(200, 100), color=(255, 0, 0, 255)) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(size, color)).decode("ascii")


def decode_result(uri: str) -> Image.Image:
    header, _, payload = uri.partition(",")
    assert header == "data:image/png;base64"
    return Image.open(BytesIO(base64.b64decode(payload))).convert("RGBA")


@pytest.fixture
def make_data_uri():
    return data_uri
