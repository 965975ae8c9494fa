"""
Helpers for working with generated HTML/CSS/JavaScript: combining the three
sections into one previewable document, light-weight formatting, and
turning HTML fragments into React components.
"""
import re
from typing import Dict, List, Optional

from models.generation import Framework, GeneratedCode

BODY_RE = re.compile(r"<body[^>]*>([\s\S]*)</body>", re.IGNORECASE)
HEAD_RE = re.compile(r"<head(?:\s[^>]*)?>([\s\S]*?)</head>", re.IGNORECASE)
TITLE_RE = re.compile(r"<title[^>]*>([\s\S]*?)</title>", re.IGNORECASE)
HEAD_RESOURCE_RE = re.compile(
    r"<(?:link|meta)\b[^>]*>|<script\b[^>]*>[\s\S]*?</script>|<style\b[^>]*>[\s\S]*?</style>",
    re.IGNORECASE,
)
# combine_code writes its own charset and viewport tags
DEFAULT_META_RE = re.compile(r"""<meta\s+(?:charset|name=["']viewport["'])""", re.IGNORECASE)
STYLESHEET_LINK_RE = re.compile(
    r"""<link\s+rel=["']stylesheet["']\s+href=["']styles\.css["']\s*/?>""",
    re.IGNORECASE,
)
LOCAL_SCRIPT_RE = re.compile(
    r"""<script\s+src=["'](?:main|script)\.js["']\s*(?:/>|>\s*</script>)""",
    re.IGNORECASE,
)
COMPONENT_RE = re.compile(
    r"""<div[^>]*class="([^"]*component[^"]*)"[^>]*>([\s\S]*?)</div>""",
    re.IGNORECASE,
)
COMPONENT_NAME_RE = re.compile(r"([a-zA-Z0-9-]+)-component")
VOID_TAGS = {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
TAG_NAME_RE = re.compile(r"<([a-zA-Z][\w-]*)")

DEFAULT_TITLE = "Generated App"


def extract_body(html: str) -> str:
    """Return the inner <body> content, or the input unchanged if it is a fragment."""
    match = BODY_RE.search(html)
    return match.group(1) if match else html


def strip_local_assets(html: str) -> str:
    """Remove the styles.css link and main.js/script.js tags whose content gets inlined."""
    html = STYLESHEET_LINK_RE.sub("", html)
    return LOCAL_SCRIPT_RE.sub("", html)


def extract_head_resources(html: str) -> List[str]:
    """
    Return the <link>, <meta>, <script> and <style> tags of a whole document's
    <head>, minus the local asset references and the default meta tags.
    """
    match = HEAD_RE.search(html)
    if not match:
        return []
    head = strip_local_assets(match.group(1))
    return [tag for tag in HEAD_RESOURCE_RE.findall(head) if not DEFAULT_META_RE.match(tag)]


def combine_code(html: str, css: str, js: str, title: Optional[str] = None) -> str:
    """
    Combine HTML, CSS and JavaScript into one standalone document.

    The css goes into a <style> block in <head> and the javascript into a
    <script> block right before </body>. References to the separate
    stylesheet and script files are dropped since their content is inlined.
    When html is a whole document, its <head> resources (CDN stylesheets,
    fonts, external scripts) are kept ahead of the generated css and its
    <title> is used unless one is given.
    """
    body = strip_local_assets(extract_body(html)).strip()
    if title is None:
        title_match = TITLE_RE.search(html)
        title = title_match.group(1).strip() if title_match else DEFAULT_TITLE
    resources = "".join(f"  {tag}\n" for tag in extract_head_resources(html))
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"  <title>{title}</title>\n"
        f"{resources}"
        "  <style>\n"
        f"{css.strip()}\n"
        "  </style>\n"
        "</head>\n"
        "<body>\n"
        f"{body}\n"
        "  <script>\n"
        f"{js.strip()}\n"
        "  </script>\n"
        "</body>\n"
        "</html>"
    )


def format_html(html: str) -> str:
    """Indent HTML by tag nesting. Not a real parser; good enough for display."""
    formatted = []
    indent = 0
    lines = re.split(r">\s*<", html)

    for index, line in enumerate(lines):
        current = line if index == 0 else "<" + line
        if index != len(lines) - 1:
            current += ">"

        is_closing = current.startswith("</")
        is_self_closing = current.endswith("/>")
        is_doctype = re.search(r"<!DOCTYPE", current, re.IGNORECASE) is not None
        is_comment = "<!--" in current
        # <p>text</p> opens and closes on one line
        is_inline = not is_closing and "</" in current
        tag_match = TAG_NAME_RE.match(current)
        is_void = tag_match is not None and tag_match.group(1).lower() in VOID_TAGS

        if is_closing and not is_comment:
            indent = max(indent - 1, 0)

        formatted.append("  " * indent + current)

        if not (is_closing or is_self_closing or is_doctype or is_comment or is_inline or is_void):
            indent += 1

    return "\n".join(formatted).strip()


def format_css(css: str) -> str:
    """Put each declaration on its own line and each rule in its own block."""
    formatted = re.sub(r"\s+", " ", css).strip()
    formatted = (
        formatted.replace("{", " {\n  ")
        .replace(";", ";\n  ")
        .replace("}", "\n}\n")
        .replace("\n  \n}", "\n}")
    )
    return formatted.strip()


def format_js(js: str) -> str:
    """Re-indent JavaScript by brace depth, line by line."""
    formatted = []
    indent = 0

    for line in js.split("\n"):
        trimmed = line.strip()
        if not trimmed:
            formatted.append("")
            continue

        if trimmed.startswith("}"):
            indent = max(indent - 1, 0)

        formatted.append("  " * indent + trimmed)

        if trimmed.endswith("{"):
            indent += 1

    return "\n".join(formatted).strip()


def extract_components(html: str) -> List[Dict[str, str]]:
    """Find <div class="...component..."> blocks and name them after their class."""
    components = []
    for match in COMPONENT_RE.finditer(html):
        name_match = COMPONENT_NAME_RE.search(match.group(1))
        name = name_match.group(1) if name_match else f"Component{len(components) + 1}"
        components.append({
            "name": name[:1].upper() + name[1:],
            "code": match.group(0),
        })
    return components


def html_to_react_component(html: str, component_name: str) -> str:
    """Wrap an HTML fragment in a function component, fixing JSX attribute names."""
    react_code = html.replace('class="', 'className="').replace('for="', 'htmlFor="')
    return (
        "import React from 'react';\n"
        "\n"
        f"export default function {component_name}() {{\n"
        "  return (\n"
        f"    {react_code}\n"
        "  );\n"
        "}"
    )


FRAMEWORK_MAIN_FILES = {
    "vanilla": "src/index.html",
    "react": "src/App.jsx",
    "vue": "src/App.vue",
    "svelte": "src/App.svelte",
    "astro": "src/pages/index.astro",
}


def project_files(code: GeneratedCode) -> Dict[str, str]:
    """
    Lay the generated code out as project files, keyed by path relative to
    the project root. Empty optional sections are left out.
    """
    framework = (code.framework or Framework.VANILLA).value
    files = {FRAMEWORK_MAIN_FILES[framework]: code.html}

    if framework == "vanilla":
        files["src/styles.css"] = code.css
        files["src/main.js"] = code.javascript
        return files

    if code.css:
        files["src/styles.css"] = code.css
    if code.package_json:
        files["package.json"] = code.package_json
    for name, content in (code.config_files or {}).items():
        files[name] = content
    return files


FORMATTERS = {
    "html": format_html,
    "css": format_css,
    "javascript": format_js,
}


def format_code(code: str, language: str) -> str:
    """Format code with the indenter for its language."""
    formatter = FORMATTERS.get(language)
    if formatter is None:
        raise ValueError(f"No formatter for '{language}'")
    return formatter(code)


def react_components_from_html(html: str) -> List[Dict[str, str]]:
    """Extract the components of an HTML page and convert each to a React component."""
    return [
        {**component, "react_code": html_to_react_component(component["code"], component["name"])}
        for component in extract_components(html)
    ]
