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

import os
import shutil
import tempfile
import unittest

from docx import Document

from thesis_format.generator import FixedTextWriter
from thesis_format.styles import extract_style_report

class TestFixedTextWriter(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_write_docx_one_paragraph_per_line(self):
        path = os.path.join(self.test_dir, "fixed.docx")
        FixedTextWriter().write("第一章 引言\n近年来，人工智能技术发展迅速。", path)

        doc = Document(path)
        texts = [p.text for p in doc.paragraphs]
        self.assertEqual(texts, ["第一章 引言", "近年来，人工智能技术发展迅速。"])

    def test_docx_body_font_visible_in_style_report(self):
        path = os.path.join(self.test_dir, "fixed.docx")
        FixedTextWriter(latin_font="Times New Roman", east_asia_font="SimSun", size_pt=12).write("text", path)

        report = extract_style_report(path)
        self.assertIn('西文="Times New Roman", 中文="SimSun"', report)
        self.assertIn("字号: 24 (即 12pt)", report)

    def test_write_text(self):
        path = os.path.join(self.test_dir, "out", "fixed.txt")
        written = FixedTextWriter().write("修复后的文本", path)

        self.assertEqual(written, path)
        with open(path, encoding="utf-8") as f:
            self.assertEqual(f.read(), "修复后的文本")

if __name__ == '__main__':
    unittest.main()
