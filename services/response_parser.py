"""
Turns raw LLM output into GeneratedCode.

Fenced blocks are read by a small tokenizer instead of a regex so nested or
unterminated fences cannot swallow neighbouring blocks. Required sections
always come from the first block with the matching tag; extra blocks in
framework responses become config files, with the last block per tag winning.
"""
import re
import logging
from enum import Enum
from html import escape
from typing import Dict, Iterator, List, NamedTuple

from models.generation import Framework, GeneratedCode
from prompts.generation_prompts import FRAMEWORK_EMOJI, FRAMEWORK_PROMPTS
from services.code_utils import combine_code
from services.exceptions import ParseError

logger = logging.getLogger(__name__)

FENCE = "```"
TAG_RE = re.compile(r"\w+")
PREVIEW_LENGTH = 300

VANILLA_SECTIONS = ("html", "css", "javascript")


class FenceState(Enum):
    OUTSIDE = "outside"
    AWAITING_TAG = "awaiting-tag"
    BODY = "body"


class CodeBlock(NamedTuple):
    tag: str
    body: str


def iter_code_blocks(text: str) -> Iterator[CodeBlock]:
    """
    Yield every fenced block in document order.

    The tag is the first word of the info string after the opening fence,
    lower-cased; untagged blocks get an empty tag. Opening fences only count
    at the start of a line (indentation allowed). A block without a closing
    fence is dropped, as is a fence that opens and closes on the same line.
    """
    state = FenceState.OUTSIDE
    pos = 0
    tag = ""

    while True:
        if state is FenceState.OUTSIDE:
            start = text.find(FENCE, pos)
            if start == -1:
                return
            pos = start + len(FENCE)
            line_start = text.rfind("\n", 0, start) + 1
            if text[line_start:start].strip(" \t"):
                # fences mentioned mid-sentence do not open a block
                continue
            state = FenceState.AWAITING_TAG

        elif state is FenceState.AWAITING_TAG:
            line_end = text.find("\n", pos)
            if line_end == -1:
                return
            inline_close = text.find(FENCE, pos, line_end)
            if inline_close != -1:
                # ```inline``` spans are not code blocks
                pos = inline_close + len(FENCE)
                state = FenceState.OUTSIDE
                continue
            match = TAG_RE.match(text[pos:line_end].strip())
            tag = match.group(0).lower() if match else ""
            pos = line_end + 1
            state = FenceState.BODY

        elif state is FenceState.BODY:
            end = text.find(FENCE, pos)
            if end == -1:
                logger.debug(f"Dropping unterminated '{tag}' block")
                return
            body = text[pos:end]
            # The newline before a closing fence on its own line is not content
            if body.endswith("\r\n"):
                body = body[:-2]
            elif body.endswith("\n"):
                body = body[:-1]
            yield CodeBlock(tag, body)
            pos = end + len(FENCE)
            state = FenceState.OUTSIDE


def first_block_per_tag(blocks: List[CodeBlock]) -> Dict[str, str]:
    found: Dict[str, str] = {}
    for block in blocks:
        if block.tag and block.tag not in found:
            found[block.tag] = block.body
    return found


def parse_vanilla_code(response_text: str) -> GeneratedCode:
    """Extract the html, css and javascript sections; all three are required."""
    found = first_block_per_tag(list(iter_code_blocks(response_text)))

    for section in VANILLA_SECTIONS:
        logger.debug(f"{section} block found: {section in found}")
        if not found.get(section, "").strip():
            raise ParseError(
                f"Response is missing the {section} section. "
                "Make sure the API is returning code in the expected format.",
                section=section,
            )

    html, css, javascript = (found[section] for section in VANILLA_SECTIONS)
    return GeneratedCode(
        html=html,
        css=css,
        javascript=javascript,
        full_code=combine_code(html, css, javascript),
        framework=Framework.VANILLA,
    )


def build_placeholder_document(main_code: str, framework: Framework) -> str:
    """
    Static page shown instead of a live preview for framework code, which
    would need a bundler to run.
    """
    framework = Framework(framework)
    name = framework.value.capitalize()
    preview = main_code[:PREVIEW_LENGTH] + ("..." if len(main_code) > PREVIEW_LENGTH else "")

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Generated {name} App</title>
  <style>
    body {{
      font-family: system-ui, -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
      display: flex;
      flex-direction: column;
      align-items: center;
      justify-content: center;
      min-height: 100vh;
      margin: 0;
      background-color: #f5f5f5;
      color: #333;
      text-align: center;
      padding: 20px;
    }}
    .container {{
      max-width: 800px;
      background-color: white;
      border-radius: 8px;
      padding: 30px;
      box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);
    }}
    h1 {{
      margin-top: 0;
      color: #2563eb;
    }}
    pre {{
      background-color: #f1f5f9;
      padding: 15px;
      border-radius: 4px;
      overflow: auto;
      text-align: left;
      max-height: 300px;
    }}
    .framework-logo {{
      font-size: 48px;
      margin-bottom: 20px;
    }}
  </style>
</head>
<body>
  <div class="container">
    <div class="framework-logo">{FRAMEWORK_EMOJI[framework.value]}</div>
    <h1>{name} Application Generated</h1>
    <p>Your {framework.value} application has been successfully generated. The code can be viewed in the "Code" tab.</p>
    <p>To run this application, you would typically:</p>
    <ol style="text-align: left;">
      <li>Create a new {framework.value} project</li>
      <li>Copy the generated code into the appropriate files</li>
      <li>Install dependencies with npm or yarn</li>
      <li>Start the development server</li>
    </ol>
    <p>Here's a preview of the main component:</p>
    <pre>{escape(preview)}</pre>
  </div>
</body>
</html>"""


def parse_framework_code(response_text: str, framework: Framework) -> GeneratedCode:
    """Extract the main component plus optional css, package.json and config files."""
    framework = Framework(framework)
    main_tag = FRAMEWORK_PROMPTS[framework.value]["main_tag"]
    blocks = list(iter_code_blocks(response_text))
    found = first_block_per_tag(blocks)

    main_code = found.get(main_tag, "")
    if not main_code.strip():
        raise ParseError(
            f"Response is missing the main {framework.value} component (```{main_tag} block)",
            section=main_tag,
        )

    config_files: Dict[str, str] = {}
    for block in blocks:
        if block.tag and block.tag not in (main_tag, "css", "json"):
            config_files[f"config.{block.tag}"] = block.body

    logger.debug(f"Parsed {framework.value} response: {len(blocks)} blocks, {len(config_files)} config files")

    return GeneratedCode(
        html=main_code,
        css=found.get("css", ""),
        javascript="",
        full_code=build_placeholder_document(main_code, framework),
        framework=framework,
        package_json=found.get("json", ""),
        config_files=config_files,
    )


def parse_response(response_text: str, framework: Framework = Framework.VANILLA) -> GeneratedCode:
    """Parse an LLM answer for the framework that was requested."""
    if Framework(framework) == Framework.VANILLA:
        return parse_vanilla_code(response_text)
    return parse_framework_code(response_text, framework)
