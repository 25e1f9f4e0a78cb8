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

import json
import unittest

from rich.console import Console

from thesis_format.models import AnalysisResult, FormatIssue, FormatErrorType, Severity
from thesis_format.report import issue_counts, render_analysis
from thesis_format.templates import TEMPLATES, get_template

def make_result():
    return AnalysisResult(
        score=58,
        summary="标题层级混乱。",
        issues=[
            FormatIssue("1", FormatErrorType.HEADING_LEVEL, Severity.CRITICAL, "编号混用", "1. 引言", "第一章 引言"),
            FormatIssue("2", FormatErrorType.CITATION, Severity.WARNING, "引用格式", "[1] Smith. AI development. 2018.", "[1] SMITH J. AI development[M]. 2018.", "参考文献"),
            FormatIssue("3", FormatErrorType.PUNCTUATION, Severity.WARNING, "半角句号", "数据.", "数据。"),
        ],
    )

class TestRenderAnalysis(unittest.TestCase):

    def render(self, result):
        console = Console(record=True, width=200, color_system=None)
        render_analysis(result, console)
        return console.export_text()

    def test_issue_counts(self):
        counts = issue_counts(make_result())
        self.assertEqual(counts[Severity.CRITICAL], 1)
        self.assertEqual(counts[Severity.WARNING], 2)
        self.assertEqual(counts[Severity.INFO], 0)

    def test_render_lists_issues(self):
        output = self.render(make_result())
        self.assertIn("58", output)
        self.assertIn("标题层级混乱。", output)
        self.assertIn("HEADING_LEVEL", output)
        self.assertIn("第一章 引言", output)
        # square brackets from citations must survive markup processing
        self.assertIn("[1] Smith", output)

    def test_render_without_issues(self):
        output = self.render(AnalysisResult(score=100, summary="格式规范。"))
        self.assertIn("未发现格式问题", output)


class TestModels(unittest.TestCase):

    def test_issues_description(self):
        description = make_result().issues_description()
        lines = description.splitlines()
        self.assertEqual(len(lines), 3)
        self.assertEqual(lines[0], 'HEADING_LEVEL: Change "1. 引言" to "第一章 引言"')

    def test_rules_json(self):
        rules = json.loads(get_template("gbt-7713").rules_json())
        self.assertEqual(rules["citation_style"], "GB/T 7714-2015")
        self.assertEqual(len(rules["heading_hierarchy"]), 3)

    def test_unknown_template(self):
        with self.assertRaises(KeyError) as ctx:
            get_template("mla")
        self.assertIn("gbt-7713", ctx.exception.args[0])

    def test_templates_keyed_by_id(self):
        for template_id, template in TEMPLATES.items():
            self.assertEqual(template.id, template_id)

if __name__ == '__main__':
    unittest.main()
