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
Writes the auto-fixed thesis text to disk.
"""

import logging
from pathlib import Path

from docx import Document
from docx.oxml.ns import qn
from docx.shared import Pt

logger = logging.getLogger(__name__)

class FixedTextWriter:
    """
    Saves fixed text as a DOCX (one paragraph per line) or as plain UTF-8 text.
    """
    def __init__(self, latin_font: str = "Times New Roman", east_asia_font: str = "SimSun", size_pt: int = 12):
        self.latin_font = latin_font
        self.east_asia_font = east_asia_font
        self.size_pt = size_pt

    def write(self, text: str, path: str) -> str:
        output = Path(path)
        if output.parent and not output.parent.exists():
            output.parent.mkdir(parents=True)
            logger.info(f"Created output directory: {output.parent}")

        if output.suffix.lower() == ".docx":
            self._write_docx(text, output)
        else:
            output.write_text(text, encoding="utf-8")

        logger.info(f"Fixed text written to: {output}")
        return str(output)

    def _write_docx(self, text: str, output: Path):
        document = Document()
        self._setup_styles(document)
        for line in text.splitlines():
            document.add_paragraph(line)
        document.save(str(output))

    def _setup_styles(self, document):
        """Body font: Latin and East Asian faces set separately on Normal."""
        style = document.styles['Normal']
        style.font.name = self.latin_font
        style.font.size = Pt(self.size_pt)
        r_fonts = style.element.get_or_add_rPr().get_or_add_rFonts()
        r_fonts.set(qn('w:eastAsia'), self.east_asia_font)
