"""
engine/pages.py — Page Geometry Analyzer

Loads the page tree with pikepdf and flags pages whose dimensions differ
from the first page, a sign of pages inserted from another document.
"""
import io
import logging
from typing import List, Dict, Any

from engine.report import Finding, Severity

logger = logging.getLogger(__name__)

DIMENSION_TOLERANCE = 1.0


def inspect(buffer: bytes, config: dict) -> Dict[str, Any]:
    """
    Run the Page Geometry Analyzer.

    Returns:
        {
            "findings": [Finding],
            "module_data": {"loaded": bool, "total_pages": int,
                            "inconsistent_pages": [str], "unreadable_pages": [str],
                            "dimensions": [[w, h] or None, ...]}
        }
    """
    findings: List[Finding] = []
    module_data: Dict[str, Any] = {
        "loaded": False,
        "total_pages": 0,
        "inconsistent_pages": [],
        "unreadable_pages": [],
        "dimensions": [],
    }

    try:
        import pikepdf

        with pikepdf.open(io.BytesIO(buffer), password="", suppress_warnings=True) as pdf:
            dimensions = []
            unreadable = []
            for index, page in enumerate(pdf.pages, start=1):
                try:
                    dimensions.append(_page_size(page))
                except Exception as e:
                    logger.debug("Page %d MediaBox unreadable: %s", index, e)
                    dimensions.append(None)
                    unreadable.append(f"Page {index}: MediaBox unreadable ({type(e).__name__})")
        module_data["loaded"] = True
    except Exception as exc:
        logger.warning("Page geometry unavailable: %s", exc)
        findings.append(_finding(
            Severity.MEDIUM, "Structure", "Could not load PDF for page analysis",
            "The page tree could not be loaded. Page-level analysis is unavailable.",
            [f"{type(exc).__name__}: {exc}"[:200]],
        ))
        return {"findings": findings, "module_data": module_data}

    module_data["total_pages"] = len(dimensions)
    module_data["dimensions"] = [list(d) if d else None for d in dimensions]
    module_data["unreadable_pages"] = unreadable

    if unreadable:
        findings.append(_finding(
            Severity.MEDIUM, "Pages", f"Unreadable page dimensions on {len(unreadable)} page(s)",
            "Some pages have no usable MediaBox and were left out of the page size comparison.",
            unreadable,
        ))

    measured = [(index, d) for index, d in enumerate(dimensions, start=1) if d is not None]
    if not measured:
        return {"findings": findings, "module_data": module_data}

    std_w, std_h = measured[0][1]
    inconsistent = []
    for index, (w, h) in measured[1:]:
        if abs(w - std_w) > DIMENSION_TOLERANCE or abs(h - std_h) > DIMENSION_TOLERANCE:
            inconsistent.append(
                f"Page {index}: {w:g}x{h:g} differs from standard {std_w:g}x{std_h:g}"
            )
    module_data["inconsistent_pages"] = inconsistent

    if inconsistent:
        findings.append(_finding(
            Severity.HIGH, "Pages", f"Inconsistent page sizes on {len(inconsistent)} page(s)",
            "Some pages have different dimensions than the first page. All pages should "
            "typically be the same size. Different sizes suggest pages were inserted from a "
            "different document.",
            inconsistent,
        ))

    return {"findings": findings, "module_data": module_data}


def _page_size(page):
    """Width and height of the page's MediaBox (inherited from the page tree if needed)."""
    x0, y0, x1, y1 = (float(v) for v in page.mediabox)
    return abs(x1 - x0), abs(y1 - y0)


def _finding(severity: Severity, category: str, title: str, detail: str, evidence) -> Finding:
    return Finding.create(severity, category, title, detail, evidence)
