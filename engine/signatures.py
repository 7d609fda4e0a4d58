"""
engine/signatures.py — Signature Presence Analyzer

Reports whether digital-signature dictionaries are present. Signature
validity is not checked here.
"""
import re
import logging
from typing import Dict, Any

from engine.report import Finding, Severity

logger = logging.getLogger(__name__)

_SIG_PATTERN = re.compile(rb"/Type\s*/Sig\b|/SubFilter\s*/adbe")


def inspect(buffer: bytes, config: dict) -> Dict[str, Any]:
    """Count signature dictionary markers and emit one informational finding."""
    count = len(_SIG_PATTERN.findall(buffer))

    if count == 0:
        finding = _finding(
            "No digital signatures found",
            "Court-approved documents should typically be digitally signed. Absence of "
            "signatures on court documents is notable.",
            [],
        )
    else:
        finding = _finding(
            f"Digital signature(s) found ({count})",
            "Document contains digital signature references. Signature validity is not verified "
            "by this analysis and should be checked with the issuing certificate authority.",
            [f"Signature references: {count}"],
        )

    return {"findings": [finding], "module_data": {"count": count}}


def _finding(title: str, detail: str, evidence) -> Finding:
    return Finding.create(Severity.INFO, "Signatures", title, detail, evidence)
