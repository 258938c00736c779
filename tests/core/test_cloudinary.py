"""
Tests for Cloudinary helpers.
"""
import pytest

from clinic.core import cloudinary as storage


@pytest.mark.parametrize("url, public_id", [
    ("https://res.cloudinary.com/demo/image/upload/v1712/san_rafael/doctores/abc.png", "san_rafael/doctores/abc"),
    ("https://res.cloudinary.com/demo/raw/upload/san_rafael/historias_clinicas/informe.pdf", "san_rafael/historias_clinicas/informe"),
    ("https://example.com/foto.png", None),
    (None, None),
])
def test_extract_public_id(url, public_id):
    assert storage.extract_public_id(url) == public_id


def test_delete_file_reports_result(monkeypatch):
    calls = []

    def fake_destroy(public_id, resource_type="image"):
        calls.append((public_id, resource_type))
        return {"result": "ok"}

    monkeypatch.setattr(storage.cloudinary.uploader, "destroy", fake_destroy)

    assert storage.delete_file("https://res.cloudinary.com/demo/raw/upload/v3/san_rafael/historias_clinicas/a.pdf")
    assert calls == [("san_rafael/historias_clinicas/a", "raw")]


def test_delete_file_failure_is_not_raised(monkeypatch):
    def broken_destroy(public_id, resource_type="image"):
        raise RuntimeError("network down")

    monkeypatch.setattr(storage.cloudinary.uploader, "destroy", broken_destroy)
    assert storage.delete_file("https://res.cloudinary.com/demo/image/upload/v1/x.png") is False


def test_upload_failure_returns_none(monkeypatch):
    def broken_upload(*args, **kwargs):
        raise RuntimeError("network down")

    monkeypatch.setattr(storage.cloudinary.uploader, "upload", broken_upload)

    class Upload:
        filename = "foto.png"
        file = b""

    assert storage.upload_file(Upload(), storage.PATIENTS_FOLDER) is None
