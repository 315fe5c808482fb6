"""Markdown parsing utilities for wiki-links and markdown links."""

import re
from urllib.parse import unquote

# Match [[target]], [[target|display]], [[target#section]], [[target#section|display]], ![[embed]]
WIKILINK_PATTERN = re.compile(r"\[\[([^\]|#]+)(?:#[^\]|]*)?(?:\|[^\]]*)?\]\]")

# Match [label](target) and [label](<target with spaces>), ignoring any "title"
MDLINK_PATTERN = re.compile(r"\[[^\]]*\]\(\s*(<[^>]+>|[^)\s]+)(?:\s+\"[^\"]*\")?\s*\)")

URL_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")

# Fenced and inline code are not links
CODE_PATTERN = re.compile(r"```.*?```|~~~.*?~~~|`[^`\n]*`", re.DOTALL)


def extract_links(content: str) -> list[str]:
    """Extract link targets from content, in order of first appearance.

    Targets keep their original spelling; resolution against the vault is
    case-insensitive and happens later. Section anchors are stripped.
    """
    text = CODE_PATTERN.sub("", content)

    found: list[tuple[int, str]] = []
    for match in WIKILINK_PATTERN.finditer(text):
        found.append((match.start(), match.group(1)))
    for match in MDLINK_PATTERN.finditer(text):
        target = _markdown_target(match.group(1))
        if target:
            found.append((match.start(), target))
    found.sort(key=lambda item: item[0])

    # Deduplicate while preserving order
    seen = set()
    result = []
    for _, raw in found:
        target = raw.strip()
        key = target.lower()
        if target and key not in seen:
            seen.add(key)
            result.append(target)
    return result


def _markdown_target(raw: str) -> str | None:
    """Normalize a markdown link destination, or None for external/anchor links."""
    if raw.startswith("<") and raw.endswith(">"):
        raw = raw[1:-1]
    if not raw or raw.startswith("#") or URL_SCHEME.match(raw):
        return None
    target = unquote(raw.split("#", 1)[0])
    return target or None


def extract_aliases(frontmatter: dict) -> list[str]:
    """Extract aliases from frontmatter.

    Frontmatter aliases can be:
    - List of strings: ["First", "Second"]
    - Single string
    """
    aliases = frontmatter.get("aliases") or frontmatter.get("alias") or []
    if isinstance(aliases, str):
        aliases = [aliases]
    if not isinstance(aliases, list):
        return []
    return [str(a).strip() for a in aliases if str(a).strip()]
