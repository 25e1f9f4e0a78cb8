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
Client for the Large Language Model that checks and fixes thesis formatting.
Supports Google AI Studio (Gemini) and OpenAI.
"""

import os
import json
import logging
from typing import Optional

import openai
from google import genai
from google.genai import types

from thesis_format.ingest import truncate
from thesis_format.models import AnalysisResult, FormatIssue, FormatErrorType, Severity
from thesis_format.templates import SYSTEM_PROMPT

# Logger is configured in main.py
logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
FALLBACK_GEMINI_MODELS = ["gemini-2.5-flash", "gemini-2.0-flash", "gemini-1.5-flash"]

STYLE_SECTION_HEADER = "【文档内部样式定义】"

ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "INTEGER"},
        "summary": {"type": "STRING"},
        "issues": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "STRING"},
                    "type": {"type": "STRING", "enum": [t.value for t in FormatErrorType]},
                    "severity": {"type": "STRING", "enum": [s.value for s in Severity]},
                    "description": {"type": "STRING"},
                    "originalText": {"type": "STRING"},
                    "suggestion": {"type": "STRING"},
                    "location": {"type": "STRING"},
                },
                "required": ["id", "type", "severity", "description", "originalText", "suggestion"],
            },
        },
    },
    "required": ["score", "summary", "issues"],
}

MOCK_ANALYSIS = """
{
    "score": 62,
    "summary": "示例结果：文档存在标点混用和标题层级不一致的问题。",
    "issues": [
        {
            "id": "mock-1",
            "type": "PUNCTUATION",
            "severity": "WARNING",
            "description": "中文语境中使用了半角逗号。",
            "originalText": "发展迅速,然而",
            "suggestion": "发展迅速，然而",
            "location": "引言"
        },
        {
            "id": "mock-2",
            "type": "HEADING_LEVEL",
            "severity": "CRITICAL",
            "description": "标题编号格式与模板要求不一致。",
            "originalText": "1. 引言",
            "suggestion": "第一章 引言"
        }
    ]
}
"""

def build_analysis_prompt(text: str, template_rules: str, style_report: str = "") -> str:
    """
    Assembles the analysis prompt. The style report, when given, goes under
    its own section so the model can weigh it over the plain text.
    """
    body, was_truncated = truncate(text)
    note = "(注：文本过长已被截断)" if was_truncated else ""

    style_section = ""
    if style_report:
        style_section = f"\n{STYLE_SECTION_HEADER}\n{style_report}\n"

    return f"""
请根据以下规则分析这段论文文本：{template_rules}。
{style_section}
需要分析的文本：
\"\"\"
{body}
\"\"\"
{note}

请返回一个 JSON 对象，包含：
- score (0-100 的整数)
- summary (简短的中文总结段落)
- issues (问题数组，包含 id, type, severity, description, originalText, suggestion)

字段说明：
- type 枚举值: {", ".join(t.value for t in FormatErrorType)}
- severity 枚举值: {", ".join(s.value for s in Severity)}
- description: 问题描述 (请用中文)
- suggestion: 修改建议 (请用中文)
- originalText: 原文片段
"""

def build_fix_prompt(text: str, issues_description: str) -> str:
    return f"""
你是一个自动格式化程序。请根据下列具体问题重写文本。
不要改变语义，只修正格式（标点、间距、标题样式、引用）。
仅返回修复后的文本，不要包含其他解释。

需要修复的问题：
{issues_description}

原始文本：
\"\"\"
{text}
\"\"\"
"""

def fallback_result() -> AnalysisResult:
    """Result shown when the model could not be reached or answered garbage."""
    return AnalysisResult(
        score=0,
        summary="由于 API 错误，无法分析文档。",
        issues=[FormatIssue(
            id="error-1",
            type=FormatErrorType.OTHER,
            severity=Severity.CRITICAL,
            description="API 连接失败",
            original_text="N/A",
            suggestion="请检查 API Key 并重试。",
        )],
    )

class LLMClient:
    """
    Abstraction layer for LLM providers.
    Handles the format analysis and auto-fix requests.
    """
    def __init__(self, provider: str = "gemini", model: Optional[str] = None):
        self.provider = provider
        self.api_key = (
            os.environ.get("GEMINI_API_KEY")
            or os.environ.get("API_KEY")
            or os.environ.get("OPENAI_API_KEY")
        )
        if not self.api_key:
            logger.warning("No API key found. Analysis will fall back to Mock Data.")

        self.use_openai = provider == "openai" or bool(self.api_key and self.api_key.startswith("sk-"))
        default_model = DEFAULT_OPENAI_MODEL if self.use_openai else DEFAULT_GEMINI_MODEL
        self.model = model or os.environ.get("THESIS_FORMAT_MODEL") or default_model

    def _call_llm(self, prompt: str, system_instruction: Optional[str] = None, schema: Optional[dict] = None) -> str:
        """
        Sends one prompt and returns the response text.
        Raises on API errors; callers decide what to fall back to.
        """
        if self.use_openai:
            return self._call_openai(prompt, system_instruction, json_mode=schema is not None)
        return self._call_gemini(prompt, system_instruction, schema)

    def _call_openai(self, prompt: str, system_instruction: Optional[str], json_mode: bool) -> str:
        client = openai.OpenAI(api_key=self.api_key)
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})

        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.info(f"Calling OpenAI model: {self.model}")
        response = client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=0.2,
            **kwargs
        )
        return response.choices[0].message.content or ""

    def _call_gemini(self, prompt: str, system_instruction: Optional[str], schema: Optional[dict]) -> str:
        client = genai.Client(api_key=self.api_key)

        config_args = {}
        if system_instruction:
            config_args["system_instruction"] = system_instruction
        if schema:
            config_args["response_mime_type"] = "application/json"
            config_args["response_schema"] = schema
        config = types.GenerateContentConfig(**config_args)

        # Configured model first, then the known-good fallbacks
        candidates = [self.model] + [m for m in FALLBACK_GEMINI_MODELS if m != self.model]

        last_exception = None
        for model_name in candidates:
            try:
                logger.info(f"Attempting model: {model_name}")
                response = client.models.generate_content(
                    model=model_name,
                    contents=prompt,
                    config=config,
                )
                return response.text or ""
            except Exception as e:
                logger.warning(f"Model {model_name} failed: {e}")
                last_exception = e

        raise last_exception

    def analyze_text(self, text: str, template_rules: str, style_report: str = "") -> AnalysisResult:
        """
        Checks the thesis text against the template rules.
        Never raises: API and decoding failures produce fallback_result().
        """
        if not self.api_key:
            logger.warning("[!] Using MOCK DATA for demonstration (API key missing).")
            return self._parse_analysis(MOCK_ANALYSIS)

        prompt = build_analysis_prompt(text, template_rules, style_report)
        try:
            raw = self._call_llm(prompt, system_instruction=SYSTEM_PROMPT, schema=ANALYSIS_SCHEMA)
            return self._parse_analysis(self._clean_json(raw))
        except Exception as e:
            logger.error(f"Format analysis failed: {e}")
            return fallback_result()

    def fix_text(self, text: str, issues_description: str) -> str:
        """
        Rewrites the text so the listed issues are fixed.
        Returns the original text if the call fails or yields nothing.
        """
        if not self.api_key:
            logger.warning("[!] No API key, returning the text unchanged.")
            return text

        try:
            fixed = self._call_llm(build_fix_prompt(text, issues_description))
        except Exception as e:
            logger.error(f"Auto-fix failed: {e}")
            return text
        return fixed or text

    def _parse_analysis(self, json_str: str) -> AnalysisResult:
        """
        Maps the model's JSON onto AnalysisResult.
        Raises ValueError (json.JSONDecodeError) on invalid JSON.
        """
        raw = json.loads(json_str or "{}")

        issues = []
        for i, item in enumerate(raw.get("issues", [])):
            try:
                issue_type = FormatErrorType(str(item.get("type", "")).upper())
            except ValueError:
                issue_type = FormatErrorType.OTHER
            try:
                severity = Severity(str(item.get("severity", "")).upper())
            except ValueError:
                severity = Severity.INFO

            issues.append(FormatIssue(
                id=str(item.get("id") or f"issue-{i + 1}"),
                type=issue_type,
                severity=severity,
                description=item.get("description", ""),
                original_text=item.get("originalText", item.get("original_text", "")),
                suggestion=item.get("suggestion", ""),
                location=item.get("location"),
            ))

        try:
            score = int(raw.get("score", 0))
        except (TypeError, ValueError):
            score = 0

        return AnalysisResult(
            score=max(0, min(100, score)),
            summary=raw.get("summary", ""),
            issues=issues,
        )

    def _clean_json(self, text: str) -> str:
        """Helper to strip code fences from LLM output"""
        if "```json" in text:
            text = text.split("```json")[1].split("```")[0]
        elif "```" in text:
            text = text.split("```")[1].split("```")[0]
        return text.strip()
