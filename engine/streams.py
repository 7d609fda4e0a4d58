"""
engine/streams.py — Content stream sources for the content scanner.

The scanner only ever sees an iterable of byte blocks. ``RawContentSource``
hands over the undecoded file (compressed streams stay opaque);
``DecodedContentSource`` hands over each page's decompressed content.
"""
import io
import logging
from typing import Iterator

logger = logging.getLogger(__name__)


class ContentSource:
    """Yields the byte blocks that content-stream patterns are matched against."""
    name = "base"
    decodes_streams = False

    def blocks(self, buffer: bytes) -> Iterator[bytes]:
        raise NotImplementedError


class RawContentSource(ContentSource):
    name = "raw"

    def blocks(self, buffer: bytes) -> Iterator[bytes]:
        yield buffer


class DecodedContentSource(ContentSource):
    """Page content streams decoded by pypdf; the raw buffer if the document will not parse."""
    name = "decoded"
    decodes_streams = True

    def blocks(self, buffer: bytes) -> Iterator[bytes]:
        try:
            decoded = list(self._decoded_pages(buffer))
        except Exception as e:
            logger.warning("Content stream decoding failed, scanning raw bytes: %s", e)
            yield buffer
            return
        yield from decoded

    @staticmethod
    def _decoded_pages(buffer: bytes) -> Iterator[bytes]:
        import pypdf

        reader = pypdf.PdfReader(io.BytesIO(buffer), strict=False)
        if reader.is_encrypted:
            reader.decrypt("")
        for page_num, page in enumerate(reader.pages, start=1):
            try:
                contents = page.get_contents()
            except Exception as e:
                logger.debug("Page %d content decode error: %s", page_num, e)
                continue
            if contents is not None:
                yield contents.get_data()


_SOURCES = {
    RawContentSource.name: RawContentSource,
    DecodedContentSource.name: DecodedContentSource,
}


def source_for(config: dict) -> ContentSource:
    """Instantiate the source named by ``config["CONTENT_SOURCE"]`` (default raw)."""
    name = str(config.get("CONTENT_SOURCE") or RawContentSource.name).lower()
    try:
        return _SOURCES[name]()
    except KeyError:
        raise ValueError(f"Unknown content source: {name!r}") from None
