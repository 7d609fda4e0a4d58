"""
engine/content.py — Content-Stream Scanner

Pattern-matches rendering commands that hide or disguise content: white
text, sub-point font sizes, invisible render mode, and black rectangles
drawn as fake redactions.
"""
import logging
import re
from typing import List, Dict, Any, Optional

from engine.report import Finding, Severity
from engine.streams import ContentSource, source_for

logger = logging.getLogger(__name__)

MAX_FONT_SIZE_EVIDENCE = 10
TEXT_WINDOW = 400
RECT_WINDOW = 200

# "1 1 1 rg" (or 1.0) later followed by a text-showing operator with no other fill
# colour operator (rg, g, k, sc, scn) between
_WHITE_TEXT = re.compile(
    rb"(?<![\d.])1(?:\.0*)?\s+1(?:\.0*)?\s+1(?:\.0*)?\s+rg\b"
    rb"(?:(?!\b(?:rg|g|k|sc|scn)\b).){0,%d}?T[jJ](?![A-Za-z])" % TEXT_WINDOW,
    re.S,
)
# "0 0 0 rg" later followed by a filled rectangle: "x y w h re f"
_BLACK_RECT = re.compile(
    rb"(?<![\d.])0(?:\.0*)?\s+0(?:\.0*)?\s+0(?:\.0*)?\s+rg\b"
    rb"(?:(?!\b(?:rg|g|k|sc|scn)\b).){0,%d}?\bre\s+[fF]\*?(?![A-Za-z])" % RECT_WINDOW,
    re.S,
)
_FONT_SIZE = re.compile(rb"(?<![\w.\-])(\d*\.?\d+)\s+Tf\b")
_INVISIBLE_MODE = re.compile(rb"(?<![\w.\-])3\s+Tr\b")
_COMPRESSED = re.compile(rb"/FlateDecode\b")


def inspect(buffer: bytes, config: dict, source: Optional[ContentSource] = None) -> Dict[str, Any]:
    """
    Run the Content-Stream Scanner.

    ``source`` decides which bytes are scanned; by default it comes from
    ``config["CONTENT_SOURCE"]``.
    """
    source = source or source_for(config)
    findings: List[Finding] = []

    white_text = 0
    black_rects = 0
    invisible = 0
    tiny_sizes: List[float] = []

    for block in source.blocks(buffer):
        white_text += len(_WHITE_TEXT.findall(block))
        black_rects += len(_BLACK_RECT.findall(block))
        invisible += len(_INVISIBLE_MODE.findall(block))
        for m in _FONT_SIZE.finditer(block):
            size = float(m.group(1))
            if 0 < size < 1:
                tiny_sizes.append(size)

    module_data: Dict[str, Any] = {
        "source": source.name,
        "white_text": white_text,
        "tiny_fonts": len(tiny_sizes),
        "invisible_render_mode": invisible,
        "black_rectangles": black_rects,
    }

    if white_text:
        findings.append(_finding(
            Severity.CRITICAL, "Hidden Text",
            f"WHITE TEXT color commands detected ({white_text} occurrence(s))",
            "Text rendered in white (RGB 1,1,1) found in content streams. This text is invisible "
            "on white backgrounds but contains readable content. Common technique for hiding "
            "information in plain sight.",
            [f"White color (rg) commands before text: {white_text}"],
        ))

    if tiny_sizes:
        findings.append(_finding(
            Severity.HIGH, "Hidden Text",
            f"MICROSCOPIC TEXT detected ({len(tiny_sizes)} occurrence(s))",
            "Text smaller than 1 point found. This is too small to read and may be used to hide "
            "content while keeping it technically 'present' in the document.",
            [f"Font size: {size:g}pt" for size in tiny_sizes[:MAX_FONT_SIZE_EVIDENCE]],
        ))

    if invisible:
        findings.append(_finding(
            Severity.HIGH, "Hidden Text",
            f"Invisible text render mode detected ({invisible} occurrence(s))",
            "Text Rendering Mode 3 draws glyphs without fill or stroke. It is used legitimately "
            "for OCR text layers but can also hide content from a reader.",
            [f"'3 Tr' operators: {invisible}"],
        ))

    if black_rects:
        findings.append(_finding(
            Severity.CRITICAL, "Redactions",
            f"Possible FAKE REDACTIONS detected - {black_rects} found",
            "Black-filled rectangles found in content streams. These may overlay readable text "
            "that is still extractable. True redactions permanently remove text. Extract the "
            "text beneath each rectangle to verify whether it is still present.",
            [f"Black rectangle fill patterns: {black_rects}"],
        ))

    if not source.decodes_streams:
        compressed = len(_COMPRESSED.findall(buffer))
        module_data["compressed_streams"] = compressed
        if compressed:
            findings.append(_finding(
                Severity.INFO, "Content",
                f"Compressed streams not inspected ({compressed})",
                "Content patterns were matched against raw bytes only. Manipulations inside "
                "compressed streams are not detected by this scan.",
                [f"/FlateDecode streams: {compressed}"],
            ))

    logger.debug("Content scan: %s", module_data)
    return {"findings": findings, "module_data": module_data}


def _finding(severity: Severity, category: str, title: str, detail: str, evidence) -> Finding:
    return Finding.create(severity, category, title, detail, evidence)
