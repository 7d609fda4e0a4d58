"""
engine/extractor.py — Document Extractor

Best-effort pypdf parse that recovers page count, plain text and the
merged DocInfo + XMP metadata. Parse failures are reported as findings,
never raised.
"""
import io
import logging
from datetime import datetime
from typing import List, Dict, Any

from engine.report import Finding, Severity

logger = logging.getLogger(__name__)

XMP_PREFIX = "xmp:"

# pypdf XmpInformation attributes worth surfacing
_XMP_FIELDS = (
    "dc_title", "dc_creator", "dc_description", "dc_subject", "dc_date",
    "pdf_producer", "pdf_keywords", "pdf_pdfversion",
    "xmp_creator_tool", "xmp_create_date", "xmp_modify_date", "xmp_metadata_date",
    "xmpmm_document_id", "xmpmm_instance_id",
)


def inspect(buffer: bytes, config: dict) -> Dict[str, Any]:
    """
    Run the Document Extractor over the raw buffer.

    Returns:
        {
            "findings": [Finding],
            "module_data": {"page_count": int, "text": str, "metadata": {str: str}}
        }
    """
    findings: List[Finding] = []
    module_data: Dict[str, Any] = {"page_count": 0, "text": "", "metadata": {}}
    errors: List[Exception] = []

    try:
        import pypdf

        reader = pypdf.PdfReader(io.BytesIO(buffer), strict=False)
        if reader.is_encrypted:
            reader.decrypt("")
    except Exception as exc:
        errors.append(exc)
        reader = None

    if reader is not None:
        # metadata, XMP and pages recover separately
        try:
            module_data["metadata"].update(_docinfo(reader))
        except Exception as exc:
            logger.debug("DocInfo unreadable: %s", exc)
            errors.append(exc)
        module_data["metadata"].update(_xmp(reader))

        try:
            module_data["page_count"] = len(reader.pages)
            texts = []
            for page in reader.pages:
                texts.append(page.extract_text() or "")
            module_data["text"] = "\n".join(texts)
        except Exception as exc:
            errors.append(exc)

    if errors:
        logger.warning("Document extraction degraded: %s", errors[0])
        findings.append(Finding.create(
            Severity.MEDIUM, "Structure", "PDF text extraction incomplete",
            "The PDF text layer could not be fully parsed. Metadata and structural analysis "
            "are still available. The document may use non-standard fonts or encoding.",
            [f"{type(exc).__name__}: {exc}"[:300] for exc in errors],
        ))

    return {"findings": findings, "module_data": module_data}


def _docinfo(reader) -> Dict[str, str]:
    """Info dictionary entries with string or numeric values, keyed by PDF name."""
    fields: Dict[str, str] = {}
    meta = reader.metadata
    if not meta:
        return fields
    for key in list(meta.keys()):
        try:
            value = meta[key]
        except Exception as e:
            logger.debug("Unreadable DocInfo entry %s: %s", key, e)
            continue
        if isinstance(value, (str, int, float)):
            fields[str(key)] = str(value)
    return fields


def _xmp(reader) -> Dict[str, str]:
    """Flatten the XMP packet into ``xmp:``-prefixed string fields."""
    fields: Dict[str, str] = {}
    try:
        xmp = reader.xmp_metadata
    except Exception as e:
        logger.debug("XMP stream unreadable: %s", e)
        return fields
    if xmp is None:
        return fields

    for attr in _XMP_FIELDS:
        try:
            value = _flatten(getattr(xmp, attr, None))
        except Exception as e:
            logger.debug("XMP field %s unreadable: %s", attr, e)
            continue
        if value:
            fields[XMP_PREFIX + attr] = value
    return fields


def _flatten(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        # language alternatives: {"x-default": "..."}
        return ", ".join(_flatten(v) for v in value.values() if v)
    if isinstance(value, (list, tuple)):
        return ", ".join(_flatten(v) for v in value if v)
    return str(value).strip()
