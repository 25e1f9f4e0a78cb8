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
from unittest.mock import patch

from docx import Document
from rich.console import Console

from thesis_format import main
from thesis_format.models import AnalysisResult, FormatIssue, FormatErrorType, Severity
from thesis_format.styles import REPORT_HEADER

RESULT = AnalysisResult(
    score=70,
    summary="summary",
    issues=[FormatIssue("1", FormatErrorType.PUNCTUATION, Severity.WARNING, "d", "数据.", "数据。")],
)

class TestRun(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.thesis = os.path.join(self.test_dir, "thesis.docx")
        doc = Document()
        doc.add_paragraph("我们使用Transformer模型分析数据.")
        doc.save(self.thesis)
        self.console = Console(record=True, width=200, color_system=None)
        self.parser = main.build_parser()

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def run_cli(self, *argv):
        args = self.parser.parse_args(list(argv))
        return main.run(args, self.parser, self.console)

    def test_styles_only(self):
        with patch('thesis_format.main.LLMClient') as mock_client:
            code = self.run_cli(self.thesis, "--styles-only")
        self.assertEqual(code, 0)
        mock_client.assert_not_called()
        self.assertIn(REPORT_HEADER, self.console.export_text())

    def test_missing_thesis(self):
        code = self.run_cli(os.path.join(self.test_dir, "missing.docx"))
        self.assertEqual(code, 1)

    def test_unknown_template(self):
        with patch('thesis_format.main.LLMClient'):
            code = self.run_cli(self.thesis, "--template", "mla")
        self.assertEqual(code, 1)

    @patch('thesis_format.main.LLMClient')
    def test_analysis_passes_style_report(self, mock_client_class):
        client = mock_client_class.return_value
        client.analyze_text.return_value = RESULT

        code = self.run_cli(self.thesis)

        self.assertEqual(code, 0)
        text, rules, style_report = client.analyze_text.call_args[0]
        self.assertIn("数据.", text)
        self.assertIn("GB/T 7714-2015", rules)
        self.assertTrue(style_report.startswith(REPORT_HEADER))
        client.fix_text.assert_not_called()

    @patch('thesis_format.main.LLMClient')
    def test_fix_writes_output(self, mock_client_class):
        client = mock_client_class.return_value
        client.analyze_text.return_value = RESULT
        client.fix_text.return_value = "我们使用Transformer模型分析数据。"
        output = os.path.join(self.test_dir, "fixed.txt")

        code = self.run_cli(self.thesis, "--fix", "--output", output)

        self.assertEqual(code, 0)
        client.fix_text.assert_called_once()
        self.assertIn('Change "数据." to "数据。"', client.fix_text.call_args[0][1])
        with open(output, encoding="utf-8") as f:
            self.assertEqual(f.read(), "我们使用Transformer模型分析数据。")

    @patch('thesis_format.main.LLMClient')
    def test_sample_has_no_style_report(self, mock_client_class):
        client = mock_client_class.return_value
        client.analyze_text.return_value = RESULT

        code = self.run_cli("--sample")

        self.assertEqual(code, 0)
        self.assertEqual(client.analyze_text.call_args[0][2], "")

    @patch('thesis_format.main.read_document')
    @patch('thesis_format.main.LLMClient')
    def test_rules_from_url(self, mock_client_class, mock_read):
        mock_read.side_effect = lambda source: "正文宋体小四" if source.startswith("http") else "论文正文"
        mock_client_class.return_value.analyze_text.return_value = RESULT

        code = self.run_cli(self.thesis, "--rules", "https://example.edu/thesis-rules")

        self.assertEqual(code, 0)
        rules = mock_client_class.return_value.analyze_text.call_args[0][1]
        self.assertEqual(rules, "正文宋体小四")

    def test_list_templates(self):
        code = self.run_cli("--list-templates")
        self.assertEqual(code, 0)
        self.assertIn("top-uni-thesis", self.console.export_text())

if __name__ == '__main__':
    unittest.main()
