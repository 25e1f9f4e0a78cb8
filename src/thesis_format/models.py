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
Data models for the thesis format checker.
"""

import json
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Optional

class FormatErrorType(str, Enum):
    PUNCTUATION = "PUNCTUATION"
    HEADING_LEVEL = "HEADING_LEVEL"
    SPACING = "SPACING"
    CITATION = "CITATION"
    FONT = "FONT"
    OTHER = "OTHER"

class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"

class AppStep(str, Enum):
    """Stages of a check run, in order."""
    UPLOAD = "UPLOAD"
    ANALYZING = "ANALYZING"
    REPORT = "REPORT"
    FIXING = "FIXING"
    RESULT = "RESULT"

@dataclass
class FormatIssue:
    """A single formatting problem reported by the model."""
    id: str
    type: FormatErrorType
    severity: Severity
    description: str
    original_text: str
    suggestion: str
    location: Optional[str] = None # e.g. "Paragraph 3"

@dataclass
class AnalysisResult:
    """
    Outcome of a format analysis.
    This is what the report renders and what the fix step consumes.
    """
    score: int
    summary: str
    issues: List[FormatIssue] = field(default_factory=list)

    def issues_description(self) -> str:
        """One instruction line per issue, fed to the fix prompt."""
        return "\n".join(
            f'{issue.type.value}: Change "{issue.original_text}" to "{issue.suggestion}"'
            for issue in self.issues
        )

@dataclass
class TemplateRules:
    font_main: str
    heading_hierarchy: List[str]
    line_spacing: str
    citation_style: str
    punctuation: str

@dataclass
class TemplateConfig:
    """A named set of formatting rules (national standard, university template...)."""
    id: str
    name: str
    institution: str
    rules: TemplateRules

    def rules_json(self) -> str:
        return json.dumps(asdict(self.rules), ensure_ascii=False)

@dataclass
class StyleDefinition:
    """
    One w:style entry of word/styles.xml, as read without inheritance.
    Values are the raw attribute strings; None means the attribute was absent.
    """
    style_id: str
    display_name: str
    has_run_properties: bool = False
    has_fonts: bool = False
    ascii_font: Optional[str] = None
    east_asia_font: Optional[str] = None
    size: Optional[str] = None # half-points, e.g. "24" = 12pt
    has_bold: bool = False
    bold_value: Optional[str] = None
    has_paragraph_properties: bool = False
    has_spacing: bool = False
    line: Optional[str] = None # 240 = single, 360 = 1.5 lines when rule is auto
    line_rule: Optional[str] = None
    has_justification: bool = False
    justification: Optional[str] = None

    @property
    def is_bold(self) -> bool:
        # <w:b/> without w:val means on; only an explicit "0" turns it off
        return self.has_bold and self.bold_value != "0"
