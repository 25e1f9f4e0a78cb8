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
Reads thesis text and formatting rules from DOCX, PDF, plain text or a URL.
"""

import logging
from pathlib import Path

import requests
import urllib3
from bs4 import BeautifulSoup
from docx import Document
from pypdf import PdfReader

urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

logger = logging.getLogger(__name__)

# The analysis prompt only carries the beginning of the thesis
MAX_ANALYSIS_CHARS = 10000

def read_docx(file_path: str) -> str:
    """
    Extracts paragraph text from a DOCX file.
    """
    try:
        doc = Document(file_path)
        return '\n'.join(para.text for para in doc.paragraphs)
    except Exception as e:
        logger.error(f"Error reading {file_path}: {e}")
        return ""

def read_pdf(file_path: str) -> str:
    """
    Extracts text from a PDF file.
    """
    try:
        reader = PdfReader(file_path)
        return '\n'.join(page.extract_text() or "" for page in reader.pages)
    except Exception as e:
        logger.error(f"Error reading PDF {file_path}: {e}")
        return ""

def _extract_text_from_html(html) -> str:
    """Extracts clean text from raw HTML content."""
    soup = BeautifulSoup(html, 'html.parser')

    for tag in soup(["script", "style", "nav", "footer"]):
        tag.decompose()

    lines = (line.strip() for line in soup.get_text().splitlines())
    return '\n'.join(line for line in lines if line)

def read_url(url: str) -> str:
    """
    Fetches a formatting guideline page (e.g. a graduate school's thesis rules)
    and returns its visible text.
    """
    headers = {'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0 Safari/537.36'}
    try:
        try:
            response = requests.get(url, headers=headers, timeout=10)
            response.raise_for_status()
        except requests.exceptions.SSLError:
            logger.warning(f"SSL verification failed for {url}. Retrying without verification (Unsafe)...")
            response = requests.get(url, headers=headers, timeout=10, verify=False)
            response.raise_for_status()

        return _extract_text_from_html(response.content)
    except Exception as e:
        logger.error(f"Failed to fetch {url}: {e}")
        return ""

def read_document(source: str) -> str:
    """
    Reads any supported source, dispatching on URL scheme or file suffix.
    Unknown suffixes are read as UTF-8 text.
    """
    if source.startswith(("http://", "https://")):
        return read_url(source)

    suffix = Path(source).suffix.lower()
    if suffix == ".docx":
        return read_docx(source)
    if suffix == ".pdf":
        return read_pdf(source)

    try:
        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {source}: {e}")
        return ""

def truncate(text: str, limit: int = MAX_ANALYSIS_CHARS) -> tuple[str, bool]:
    """Returns (text cut to `limit` characters, whether it was cut)."""
    if len(text) <= limit:
        return text, False
    logger.info(f"Text has {len(text)} characters, only the first {limit} are analysed")
    return text[:limit], True
