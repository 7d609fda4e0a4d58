"""engine/census.py — Object Census: structural object counts for operator context."""
import re
from typing import Dict, Any

from engine.report import Finding, Severity

_PATTERNS = {
    "objects": re.compile(rb"\d+\s+\d+\s+obj\b"),
    "streams": re.compile(rb"(?<!end)stream\r?\n"),
    "images": re.compile(rb"/Subtype\s*/Image\b"),
    "fonts": re.compile(rb"/Type\s*/Font\b"),
    "pages": re.compile(rb"/Type\s*/Page(?![s\w])"),
}


def inspect(buffer: bytes, config: dict) -> Dict[str, Any]:
    counts = {name: len(pattern.findall(buffer)) for name, pattern in _PATTERNS.items()}

    finding = Finding.create(
        Severity.INFO, "Objects",
        f"Object census: {counts['objects']} total, {counts['streams']} streams, "
        f"{counts['images']} images",
        "Object breakdown for reference.",
        [
            f"/Page: {counts['pages']}",
            f"/Font: {counts['fonts']}",
            f"Streams: {counts['streams']}",
            f"Images: {counts['images']}",
        ],
    )
    return {"findings": [finding], "module_data": counts}
