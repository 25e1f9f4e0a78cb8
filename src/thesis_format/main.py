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
Main entry point for the thesis format checker CLI.
"""

import argparse
import sys
import logging
from collections import deque
from pathlib import Path

from rich.console import Console
from rich.live import Live
from rich.text import Text

from thesis_format.generator import FixedTextWriter
from thesis_format.ingest import read_document
from thesis_format.llm_client import LLMClient
from thesis_format.models import AppStep
from thesis_format.report import render_analysis
from thesis_format.styles import extract_style_report
from thesis_format.templates import TEMPLATES, DEFAULT_TEMPLATE_ID, SAMPLE_TEXT, get_template

logger = logging.getLogger(__name__)

LOG_DIR = Path("logs")

class StatusLogHandler(logging.Handler):
    """
    Keeps the last N log lines for a scrolling status display.
    """
    def __init__(self, maxlen=5):
        super().__init__()
        self.logs = deque(maxlen=maxlen)
        self.live = None

    def emit(self, record):
        try:
            self.logs.append(self.format(record))
            if self.live:
                self.live.update(self.get_renderable())
        except Exception:
            self.handleError(record)

    def get_renderable(self):
        return Text("\n".join(self.logs), style="dim grey50")

def setup_logging(verbosity: int, quiet: bool = False, custom_handler: logging.Handler = None):
    """
    Configures logging:
    - File: logs/thesis_format.log (DEBUG)
    - Console: -q=ERROR, -v=WARNING, -vv=INFO, -vvv=DEBUG
    """
    LOG_DIR.mkdir(exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(LOG_DIR / "thesis_format.log", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    root.addHandler(file_handler)

    if quiet or verbosity == 0:
        level = logging.ERROR
    elif verbosity == 1:
        level = logging.WARNING
    elif verbosity == 2:
        level = logging.INFO
    else:
        level = logging.DEBUG

    handler = custom_handler or logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter('%(message)s'))
    root.addHandler(handler)

    if verbosity < 3:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AI powered thesis format checker")
    parser.add_argument("thesis", nargs="?", help="Thesis file (.docx, .pdf or .txt)")
    parser.add_argument("--template", default=DEFAULT_TEMPLATE_ID, help=f"Built-in rules template (default: {DEFAULT_TEMPLATE_ID})")
    parser.add_argument("--rules", help="File or URL with formatting rules; overrides --template")
    parser.add_argument("--fix", action="store_true", help="Run the auto-fix step after the analysis")
    parser.add_argument("--output", help="Where to write the fixed text (.docx or .txt). Printed to stdout if omitted")
    parser.add_argument("--styles-only", action="store_true", help="Print the DOCX style report and exit (no LLM call)")
    parser.add_argument("--list-templates", action="store_true", help="List built-in templates")
    parser.add_argument("--sample", action="store_true", help="Analyse the built-in sample text instead of a file")
    parser.add_argument("--provider", default="gemini", choices=["gemini", "openai"], help="LLM provider")
    parser.add_argument("--model", help="Model name (default: THESIS_FORMAT_MODEL or the provider default)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase output verbosity (-v=WARNING, -vv=INFO, -vvv=DEBUG)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress status output (ERROR only)")
    return parser

def main(argv=None):
    try:
        sys.exit(_main_cli(argv))
    except KeyboardInterrupt:
        sys.stderr.write("\n\033[31m[-] Cancelled by user\033[0m\n")
        sys.exit(130)

def _main_cli(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    console = Console()

    if args.quiet or args.verbose > 0:
        setup_logging(args.verbose, quiet=args.quiet)
        return run(args, parser, console)

    # Default mode: scrolling status display while the model works
    status_handler = StatusLogHandler()
    setup_logging(2, custom_handler=status_handler)
    with Live(status_handler.get_renderable(), refresh_per_second=4, console=console, transient=True) as live:
        status_handler.live = live
        return run(args, parser, console)

def _step(step: AppStep, message: str):
    logger.info(f"[{step.value}] {message}")

def _load_rules(args) -> str:
    if args.rules:
        logger.info(f"Reading formatting rules from: {args.rules}")
        return read_document(args.rules)
    template = get_template(args.template)
    logger.info(f"Using template: {template.name} ({template.institution})")
    return template.rules_json()

def run(args, parser, console: Console) -> int:
    """
    Runs one check: read -> analyse -> report -> (fix -> result).
    Returns the process exit code.
    """
    if args.list_templates:
        for template in TEMPLATES.values():
            console.print(f"[bold]{template.id}[/]  {template.name} ({template.institution})")
        return 0

    if not args.thesis and not args.sample:
        parser.error("a thesis file is required unless --sample or --list-templates is used")

    _step(AppStep.UPLOAD, "Reading input")
    style_report = ""
    if args.sample:
        text = SAMPLE_TEXT
    else:
        if not Path(args.thesis).exists():
            logger.error(f"Thesis file not found: {args.thesis}")
            return 1
        text = read_document(args.thesis)
        if args.thesis.lower().endswith(".docx"):
            logger.info("Extracting internal style definitions...")
            style_report = extract_style_report(args.thesis)

    if args.styles_only:
        if not style_report:
            logger.error("--styles-only needs a .docx thesis")
            return 1
        console.print(style_report, markup=False, highlight=False)
        return 0

    if not text.strip():
        logger.error("Could not extract text from the thesis. Exiting.")
        return 1

    try:
        rules = _load_rules(args)
    except KeyError as e:
        logger.error(e.args[0])
        return 1
    if not rules.strip():
        logger.error("Formatting rules are empty. Exiting.")
        return 1

    client = LLMClient(provider=args.provider, model=args.model)

    _step(AppStep.ANALYZING, "Analysing document format (this may take a moment)...")
    result = client.analyze_text(text, rules, style_report)

    _step(AppStep.REPORT, f"Score {result.score}, {len(result.issues)} issues")
    render_analysis(result, console)

    if not args.fix:
        return 0

    if not result.issues:
        logger.info("Nothing to fix.")
        return 0

    _step(AppStep.FIXING, "Applying automatic fixes...")
    fixed = client.fix_text(text, result.issues_description())

    _step(AppStep.RESULT, "Done")
    if args.output:
        FixedTextWriter().write(fixed, args.output)
    else:
        console.print(fixed, markup=False, highlight=False)
    return 0

if __name__ == "__main__":
    main()
