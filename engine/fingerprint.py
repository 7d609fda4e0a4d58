"""
engine/fingerprint.py — Tool-Fingerprint Analyzer

Cross-references every metadata value against the configured catalog of
authoring/editing tools, escalates multi-tool provenance, and compares
the creator and producer fields.
"""
import logging
from typing import Callable, Dict, List, Any, Mapping, Optional, Sequence

from engine.report import Finding, Severity

logger = logging.getLogger(__name__)

DEFAULT_ESCALATION_THRESHOLD = 1

# Authoring/editing tool fingerprints, matched case-insensitively in metadata values
DEFAULT_KNOWN_TOOLS = (
    {"name": "pdftk", "description": "PDF toolkit that can modify structure, flatten layers, or alter metadata"},
    {"name": "itext", "description": "Java library for programmatic PDF modification"},
    {"name": "ghostscript", "description": "PostScript interpreter that can rebuild and modify PDFs"},
    {"name": "pikepdf", "description": "Python library for PDF manipulation"},
    {"name": "qpdf", "description": "PDF transformation tool"},
    {"name": "nitro", "description": "PDF editor with full document modification capabilities"},
    {"name": "foxit", "description": "PDF editor"},
    {"name": "libreoffice", "description": "Office suite with PDF export"},
    {"name": "ilovepdf", "description": "Online PDF editing service"},
    {"name": "smallpdf", "description": "Online PDF editing and conversion service"},
    {"name": "pdfescape", "description": "Online PDF form filler and editor"},
    {"name": "sejda", "description": "PDF editor that can rewrite page text and images"},
    {"name": "pdf24", "description": "PDF toolbox that can merge, split and edit documents"},
    {"name": "pdf-xchange", "description": "PDF editor with annotation and content editing"},
    {"name": "pdfsharp", "description": ".NET library for programmatic PDF modification"},
    {"name": "pdfbox", "description": "Java library for programmatic PDF modification"},
    {"name": "reportlab", "description": "Python library for programmatic PDF generation"},
    {"name": "camscanner", "description": "Mobile scanning app that re-renders documents"},
)

CREATOR_FIELDS = ("/Creator", "xmp:xmp_creator_tool")
PRODUCER_FIELDS = ("/Producer", "xmp:pdf_producer")

# (creator, producer) -> True when the two values look unrelated
MismatchCheck = Callable[[str, str], bool]


def substring_mismatch(creator: str, producer: str) -> bool:
    """Crude heuristic: neither value is a case-insensitive substring of the other."""
    c, p = creator.lower(), producer.lower()
    return c not in p and p not in c


def inspect(metadata: Mapping[str, str], config: dict,
            mismatch_check: MismatchCheck = substring_mismatch) -> Dict[str, Any]:
    """
    Run the Tool-Fingerprint Analyzer over the merged metadata mapping.

    ``config["KNOWN_TOOLS"]`` is an ordered list of ``{"name", "description"}``
    records, defaulting to DEFAULT_KNOWN_TOOLS when absent (an empty list
    disables matching); ``config["TOOL_ESCALATION_THRESHOLD"]`` is the number
    of distinct tools above which provenance is escalated.
    """
    catalog: Sequence[Mapping[str, str]] = config.get("KNOWN_TOOLS")
    if catalog is None:
        catalog = DEFAULT_KNOWN_TOOLS
    threshold = config.get("TOOL_ESCALATION_THRESHOLD", DEFAULT_ESCALATION_THRESHOLD)

    findings: List[Finding] = []
    tools_found: List[str] = []
    lowered = [(field, str(value).lower()) for field, value in metadata.items()]

    for tool in catalog:
        name = tool["name"].lower()
        for field, value in lowered:
            if name in value:
                if name not in tools_found:
                    tools_found.append(name)
                findings.append(_finding(
                    Severity.MEDIUM, f"PDF manipulation tool detected: {name}",
                    f"Field '{field}' contains reference to '{name}'. {tool.get('description', '')}.",
                    [f"{field}: {metadata[field]}"],
                ))

    if len(tools_found) > threshold:
        findings.insert(0, _finding(
            Severity.HIGH, "Multiple PDF creation tools detected",
            "Document was processed by multiple tools, suggesting re-processing or manipulation.",
            tools_found,
        ))

    creator = _first_present(metadata, CREATOR_FIELDS)
    producer = _first_present(metadata, PRODUCER_FIELDS)
    if creator and producer and mismatch_check(creator, producer):
        findings.append(_finding(
            Severity.MEDIUM, "Creator and Producer mismatch",
            "The document creator and producer fields differ, which may indicate the document "
            "was re-processed after initial creation.",
            [f"Creator: {creator}", f"Producer: {producer}"],
        ))

    logger.debug("Tool fingerprints: %s", tools_found)
    return {"findings": findings, "module_data": {"tools": tools_found}}


def _first_present(metadata: Mapping[str, str], fields: Sequence[str]) -> Optional[str]:
    for field in fields:
        value = str(metadata.get(field) or "").strip()
        if value:
            return value
    return None


def _finding(severity: Severity, title: str, detail: str, evidence) -> Finding:
    return Finding.create(severity, "Metadata", title, detail, evidence)
