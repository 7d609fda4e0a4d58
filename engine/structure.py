"""
engine/structure.py — Structural Scanner

Scans the raw, undecoded PDF bytes for incremental-save history, data
hidden after the final %%EOF, scripts, launch actions and embedded files.
"""
import re
import logging
from typing import List, Dict, Any

from engine.report import Finding, Severity

logger = logging.getLogger(__name__)

EOF_MARKER = b"%%EOF"
TRAILING_BYTES_THRESHOLD = 10
TRAILING_PRINTABLE_THRESHOLD = 5
TRAILING_PREVIEW_CHARS = 300

_JS_PATTERN = re.compile(rb"/JavaScript|/JS[\s(<]")
_EMBEDDED_FILE_PATTERN = re.compile(rb"/EmbeddedFile")
_LAUNCH_PATTERN = re.compile(rb"/Launch\b")


def inspect(buffer: bytes, config: dict) -> Dict[str, Any]:
    """
    Run the Structural Scanner on the raw buffer.

    Returns:
        {
            "findings": [Finding],
            "module_data": {"eof_count": int, "trailing_bytes": int, ...}
        }
    """
    findings: List[Finding] = []
    module_data: Dict[str, Any] = {}

    # ── Incremental saves (%%EOF count) ──────────────────────────────────────
    eof_count = buffer.count(EOF_MARKER)
    module_data["eof_count"] = eof_count
    if eof_count > 1:
        findings.append(_finding(
            Severity.MEDIUM, "Structure", f"Multiple cross-reference tables ({eof_count})",
            "Multiple xref tables indicate the document was modified and saved incrementally. "
            "Each xref represents a modification session.",
            [f"%%EOF markers found: {eof_count}"],
        ))

    # ── Data after the final %%EOF ───────────────────────────────────────────
    module_data["trailing_bytes"] = 0
    last_eof = buffer.rfind(EOF_MARKER)
    if last_eof >= 0:
        tail = buffer[last_eof + len(EOF_MARKER):]
        trailing_bytes = len(tail)
        module_data["trailing_bytes"] = trailing_bytes
        trimmed = tail.decode("utf-8", errors="replace").strip()
        printable = sum(1 for ch in trimmed if ch.isprintable())
        if trailing_bytes > TRAILING_BYTES_THRESHOLD and printable > TRAILING_PRINTABLE_THRESHOLD:
            findings.append(_finding(
                Severity.HIGH, "Structure", "Data found after final %%EOF",
                f"There are {trailing_bytes} bytes of data after the document end marker. "
                "This data is not part of the PDF but could contain hidden information, "
                "original document fragments, or steganographic content.",
                [f"Trailing bytes: {trailing_bytes}",
                 f"Preview: {trimmed[:TRAILING_PREVIEW_CHARS]}"],
            ))

    # ── Embedded JavaScript ──────────────────────────────────────────────────
    js_count = len(_JS_PATTERN.findall(buffer))
    module_data["javascript_refs"] = js_count
    if js_count:
        findings.append(_finding(
            Severity.HIGH, "Security", f"JavaScript detected ({js_count} reference(s))",
            "JavaScript code found in the PDF. This could be used for malicious purposes "
            "or to auto-execute actions when the document is opened.",
            [f"JavaScript references: {js_count}"],
        ))

    # ── Launch actions ───────────────────────────────────────────────────────
    launch_count = len(_LAUNCH_PATTERN.findall(buffer))
    module_data["launch_actions"] = launch_count
    if launch_count:
        findings.append(_finding(
            Severity.HIGH, "Security", f"Launch action detected ({launch_count})",
            "PDF contains /Launch actions that can start external programs or open files "
            "when triggered.",
            [f"/Launch references: {launch_count}"],
        ))

    # ── Embedded files ───────────────────────────────────────────────────────
    embedded_count = len(_EMBEDDED_FILE_PATTERN.findall(buffer))
    module_data["embedded_file_refs"] = embedded_count
    if embedded_count:
        findings.append(_finding(
            Severity.MEDIUM, "Security", f"Embedded files detected ({embedded_count})",
            "Files embedded within the PDF. These are not visible in normal viewing but exist "
            "in the file structure and could contain hidden documents or scripts.",
            [f"Embedded file references: {embedded_count}"],
        ))

    logger.debug("Structure scan: %s", module_data)
    return {"findings": findings, "module_data": module_data}


def _finding(severity: Severity, category: str, title: str, detail: str, evidence) -> Finding:
    return Finding.create(severity, category, title, detail, evidence)
