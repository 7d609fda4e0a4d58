"""
tests/conftest.py — pytest fixtures for the PDF tamper-forensics service
"""
import io
import pytest

from app import create_app
from config import TestingConfig, config_to_dict
from extensions import db


@pytest.fixture(scope="session")
def app():
    """Create a test Flask application."""
    application = create_app("testing")
    with application.app_context():
        db.create_all()
        yield application
        db.drop_all()


@pytest.fixture()
def client(app):
    """Test client for API integration tests."""
    return app.test_client()


@pytest.fixture()
def engine_config():
    return config_to_dict(TestingConfig)


# ── Minimal synthetic PDF fixtures ───────────────────────────────────────────

def make_pdf(extra_bytes: bytes = b"") -> bytes:
    """Generate a minimal hand-written PDF 1.4 document ending in '%%EOF\\n'."""
    content = b"""%PDF-1.4
1 0 obj<</Type/Catalog/Pages 2 0 R>>endobj
2 0 obj<</Type/Pages/Kids[3 0 R]/Count 1>>endobj
3 0 obj<</Type/Page/MediaBox[0 0 612 792]/Parent 2 0 R/Resources<<>>>>endobj
xref
0 4
0000000000 65535 f\r
0000000009 00000 n\r
0000000058 00000 n\r
0000000115 00000 n\r
trailer<</Size 4/Root 1 0 R>>
startxref
200
%%EOF
"""
    return content + extra_bytes


def build_pdf(page_sizes=((612, 792),), docinfo=None, xmp=None, contents=None,
              compress=True) -> bytes:
    """Build a well-formed PDF with pikepdf.

    ``contents`` is an optional content stream placed on the first page;
    ``xmp`` maps XMP property names (e.g. 'pdf:Producer') to values.
    """
    import pikepdf

    pdf = pikepdf.new()
    for size in page_sizes:
        pdf.add_blank_page(page_size=size)
    if contents is not None:
        pdf.pages[0].obj.Contents = pdf.make_stream(contents)
    for key, value in (docinfo or {}).items():
        pdf.docinfo[key] = value
    if xmp:
        with pdf.open_metadata(set_pikepdf_as_editor=False) as meta:
            for key, value in xmp.items():
                meta[key] = value
    out = io.BytesIO()
    pdf.save(out, compress_streams=compress)
    return out.getvalue()


@pytest.fixture(scope="session")
def sample_pdf_bytes():
    return make_pdf()


@pytest.fixture(scope="session")
def js_embedded_pdf_bytes():
    """PDF with /JavaScript in raw bytes."""
    return make_pdf(b"\n/JavaScript << /JS (app.alert('XSS')) >>\n")


@pytest.fixture(scope="session")
def multi_eof_pdf_bytes():
    """PDF with exactly two %%EOF markers."""
    return make_pdf(b"%%EOF\n")


@pytest.fixture(scope="session")
def mixed_page_pdf_bytes():
    """Three pages; the third is A4 landscape among US Letter pages."""
    return build_pdf(page_sizes=[(612, 792), (612, 792), (842, 595)])
