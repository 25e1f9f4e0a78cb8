# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Extracts the internal style definitions (word/styles.xml) of a DOCX file
into a short text report.

The rendered text of a thesis says little about its real formatting, so the
report surfaces the font pair, size, boldness, line spacing and alignment of
the "Normal" and heading styles for the LLM to treat as ground truth.
Extraction is shallow: basedOn chains, numbering and theme fonts are ignored
and all values except the font size are passed through as raw strings.
"""

import io
import logging
import lzma
import os
import re
import zipfile
import zlib
from typing import List, Optional

from docx.oxml.ns import qn
from lxml import etree

from thesis_format.models import StyleDefinition

logger = logging.getLogger(__name__)

STYLES_PART = "word/styles.xml"

REPORT_HEADER = "【文档内部样式定义分析 (基于 word/styles.xml)】:"
DEFAULT_LABEL = "默认"

STYLES_MISSING_MESSAGE = "无法读取文档样式定义 (word/styles.xml 不存在)"
STYLES_PARSE_FAILED_MESSAGE = "无法解析 .docx 内部 XML 结构，仅基于文本内容分析。"

# Same leading-integer reading as parseInt: "24" -> 24, "24.5" -> 24, "x" -> None
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

class StyleExtractionError(Exception):
    """Base class for failures while extracting the style report."""

class ArchiveError(StyleExtractionError):
    """The input is not a readable ZIP package."""

class MalformedXmlError(StyleExtractionError):
    """The styles part is not well-formed XML or holds no style table."""

def read_part(source, part_name: str = STYLES_PART) -> Optional[str]:
    """
    Returns the UTF-8 text of one entry of a ZIP package, or None if the
    entry does not exist.

    `source` may be raw bytes, a binary file-like object or a path.
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        with zipfile.ZipFile(source) as package:
            try:
                data = package.read(part_name)
            except KeyError:
                logger.debug(f"Part {part_name} not found in package")
                return None
    except (zipfile.BadZipFile, OSError, RuntimeError, EOFError) as e:
        raise ArchiveError(f"Cannot open document package: {e}") from e
    except (zlib.error, lzma.LZMAError) as e:
        # corrupted entry data
        raise ArchiveError(f"Cannot read {part_name}: {e}") from e

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ArchiveError(f"{part_name} is not UTF-8 text: {e}") from e

def _first(element, tag: str):
    """First descendant with the given qualified tag, like getElementsByTagName(...)[0]."""
    return next(element.iter(qn(tag)), None)

def _attr(element, name: str) -> Optional[str]:
    if element is None:
        return None
    return element.get(qn(name))

def parse_styles(xml_text: str) -> List[StyleDefinition]:
    """
    Parses the styles part and returns every w:style in document order.
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(xml_text.encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        raise MalformedXmlError(f"styles part is not well-formed XML: {e}") from e

    if root.tag != qn("w:styles"):
        raise MalformedXmlError(f"Unexpected root element {root.tag}, expected w:styles")

    styles = []
    for node in root.iter(qn("w:style")):
        style_id = _attr(node, "w:styleId") or ""
        name = _attr(_first(node, "w:name"), "w:val")

        style = StyleDefinition(style_id=style_id, display_name=name or style_id)

        r_pr = _first(node, "w:rPr")
        if r_pr is not None:
            style.has_run_properties = True
            fonts = _first(r_pr, "w:rFonts")
            if fonts is not None:
                style.has_fonts = True
                style.ascii_font = _attr(fonts, "w:ascii")
                style.east_asia_font = _attr(fonts, "w:eastAsia")
            size = _first(r_pr, "w:sz")
            if size is not None:
                style.size = _attr(size, "w:val") or "0"
            bold = _first(r_pr, "w:b")
            if bold is not None:
                style.has_bold = True
                style.bold_value = _attr(bold, "w:val")

        p_pr = _first(node, "w:pPr")
        if p_pr is not None:
            style.has_paragraph_properties = True
            spacing = _first(p_pr, "w:spacing")
            if spacing is not None:
                style.has_spacing = True
                style.line = _attr(spacing, "w:line")
                style.line_rule = _attr(spacing, "w:lineRule")
            jc = _first(p_pr, "w:jc")
            if jc is not None:
                style.has_justification = True
                style.justification = _attr(jc, "w:val")

        styles.append(style)

    logger.debug(f"Parsed {len(styles)} style definitions")
    return styles

def is_relevant(style: StyleDefinition) -> bool:
    """Keeps body text and heading styles; everything else is left out of the report."""
    style_id = style.style_id.lower()
    return "heading" in style_id or "normal" in style_id or style.display_name == "Normal"

def _size_label(raw_size: str) -> str:
    match = _LEADING_INT.match(raw_size)
    if not match:
        return raw_size
    value = int(match.group(1))
    # 24 -> "12", 21 -> "10.5"; never exponent notation
    points = str(value // 2) if value % 2 == 0 else repr(value / 2)
    return f"{value} (即 {points}pt)"

def format_style(style: StyleDefinition) -> str:
    lines = [f"[样式名称: {style.display_name} (ID: {style.style_id})]"]

    if style.has_run_properties:
        if style.has_fonts:
            lines.append(
                f'  - 字体: 西文="{style.ascii_font or DEFAULT_LABEL}", '
                f'中文="{style.east_asia_font or DEFAULT_LABEL}"'
            )
        if style.size is not None:
            lines.append(f"  - 字号: {_size_label(style.size)}")
        if style.is_bold:
            lines.append("  - 加粗: 是")

    if style.has_paragraph_properties:
        if style.has_spacing:
            lines.append(
                f"  - 行距: {style.line or DEFAULT_LABEL} (规则: {style.line_rule or DEFAULT_LABEL})"
            )
        if style.has_justification:
            lines.append(f"  - 对齐: {style.justification or DEFAULT_LABEL}")

    return "\n".join(lines)

def build_style_report(xml_text: str) -> str:
    """
    Builds the report for the relevant styles, in source order.
    Raises MalformedXmlError if the XML cannot be parsed.
    """
    blocks = [format_style(s) for s in parse_styles(xml_text) if is_relevant(s)]
    logger.debug(f"Style report covers {len(blocks)} styles")
    return REPORT_HEADER + "\n" + "".join("\n" + block for block in blocks)

def extract_style_report(source) -> str:
    """
    Reads word/styles.xml from a DOCX package and returns the style report.

    Never raises for bad input: a missing part or an unreadable archive gives
    STYLES_MISSING_MESSAGE, malformed XML gives STYLES_PARSE_FAILED_MESSAGE.
    """
    label = source if isinstance(source, (str, os.PathLike)) else "<buffer>"
    try:
        xml_text = read_part(source, STYLES_PART)
    except ArchiveError as e:
        logger.warning(f"Could not open {label} as a DOCX package: {e}")
        return STYLES_MISSING_MESSAGE

    if xml_text is None:
        logger.warning(f"{label} has no {STYLES_PART}")
        return STYLES_MISSING_MESSAGE

    try:
        return build_style_report(xml_text)
    except MalformedXmlError as e:
        logger.warning(f"Could not analyse styles of {label}: {e}")
        return STYLES_PARSE_FAILED_MESSAGE
