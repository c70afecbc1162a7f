"""
Name: Upload Lifecycle Unit Tests

Responsibilities:
  - Temp file exists inside the scope and holds the upload bytes
  - Temp file is removed on success, on error and on oversize
"""

import pytest

from matn_tahlili.crosscutting.exceptions import OversizedInputError
from matn_tahlili.infrastructure.parsers import spooled_upload

pytestmark = pytest.mark.unit


class FakeUpload:
    def __init__(self, content: bytes, filename: str = "matn.txt", block: int = 4):
        self.filename = filename
        self._content = content
        self._block = block
        self._pos = 0

    async def read(self, size: int = -1) -> bytes:
        n = self._block if size < 0 else min(size, self._block)
        piece = self._content[self._pos : self._pos + n]
        self._pos += len(piece)
        return piece


@pytest.mark.asyncio
async def test_upload_is_spooled_and_removed_on_success():
    upload = FakeUpload(b"salom dunyo")

    async with spooled_upload(upload, max_bytes=100) as path:
        assert path.exists()
        assert path.suffix == ".txt"
        assert path.read_bytes() == b"salom dunyo"

    assert not path.exists()


@pytest.mark.asyncio
async def test_temp_file_removed_when_block_raises():
    upload = FakeUpload(b"salom")
    captured = {}

    with pytest.raises(RuntimeError):
        async with spooled_upload(upload, max_bytes=100) as path:
            captured["path"] = path
            raise RuntimeError("boom")

    assert not captured["path"].exists()


@pytest.mark.asyncio
async def test_oversized_upload_raises_and_leaves_no_file(tmp_path, monkeypatch):
    import tempfile

    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    upload = FakeUpload(b"x" * 20, filename="katta.docx")

    with pytest.raises(OversizedInputError) as exc_info:
        async with spooled_upload(upload, max_bytes=10):
            pytest.fail("scope must not be entered")

    assert exc_info.value.limit_name == "upload_bytes"
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_upload_at_exact_limit_is_accepted():
    upload = FakeUpload(b"x" * 10)

    async with spooled_upload(upload, max_bytes=10) as path:
        assert path.stat().st_size == 10
