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
Built-in formatting templates, sample text and the analysis system prompt.
"""

from typing import Dict

from thesis_format.models import TemplateConfig, TemplateRules

TEMPLATES: Dict[str, TemplateConfig] = {
    "gbt-7713": TemplateConfig(
        id="gbt-7713",
        name="GB/T 7713 国家标准",
        institution="中国国家标准",
        rules=TemplateRules(
            font_main="宋体 (SimSun) 小四/12pt",
            heading_hierarchy=["黑体 三号", "黑体 四号", "黑体 小四"],
            line_spacing="1.5倍行距",
            citation_style="GB/T 7714-2015",
            punctuation="全角标点 (Full-width)",
        ),
    ),
    "top-uni-thesis": TemplateConfig(
        id="top-uni-thesis",
        name="研究生学位论文通用模板",
        institution="国内双一流高校",
        rules=TemplateRules(
            font_main="中文字体宋体，英文字体 Times New Roman 12pt",
            heading_hierarchy=["第一章 黑体三号居中", "1.1 黑体四号", "1.1.1 黑体小四"],
            line_spacing="固定行距 20pt",
            citation_style="APA 7th 或 GB/T 7714",
            punctuation="中文全角，英文半角",
        ),
    ),
}

DEFAULT_TEMPLATE_ID = "gbt-7713"

SAMPLE_TEXT = """
1. 引言
近年来人工智能技术发展迅速,然而在很多领域仍然存在问题...
1.1 研究背景
关于大语言模型的研究最早开始于2018年(Smith, 2018)。
2. 研究方法
我们使用Transformer模型分析数据.
结果如图1所示。
3. 结论
本文的格式非常混乱，存在中英文标点混用的情况。
参考文献
[1] Smith. AI development. 2018.
[2] 李四. 人工智能发展. 计算机学报.
""".strip()

SYSTEM_PROMPT = """
你是一位专业的学术编辑和论文格式排版专家。
你的任务是根据严格的格式规则分析学术文本。
你需要识别以下问题（并用中文返回结果）：
1. 标点符号错误（例如：中文语境下使用了半角 ',' 而不是全角 '，'，或者中英文混排时的标点使用错误）。
2. 标题编号或层级不一致（例如：混用了 "1." 和 "第一章"）。
3. 参考文献引用格式错误。
4. 间距问题（例如：中英文之间缺失空格）。
5. 段落结构问题。
6. 如果提供了文档内部样式定义，请以其中的字体、字号、行距和对齐数值为准检查格式。

请务必返回一个严格有效的 JSON 对象。所有描述性文字（description, suggestion, summary）必须使用中文。
"""

def get_template(template_id: str) -> TemplateConfig:
    """Looks up a built-in template by id."""
    try:
        return TEMPLATES[template_id]
    except KeyError:
        known = ", ".join(TEMPLATES)
        raise KeyError(f"Unknown template '{template_id}'. Available: {known}") from None
