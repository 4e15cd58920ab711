"""Pretty-printing pass for rendered XML text.

The document model always renders flat text first; pretty output is produced
by running :func:`format_xml` once over the complete string. Elements whose
body is only text or CDATA stay on a single line so that content is never
re-flowed. Text mixed with element children is trimmed and placed on its own
line.
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from teamcity_dsl.shared.config import FormatterConfig
from teamcity_dsl.shared.logging import get_logger

# Attribute values never contain a raw '"' (it is always escaped as &quot;)
_TOKEN_PATTERN = re.compile(
    r"<!--.*?-->"
    r"|<!\[CDATA\[.*?\]\]>"
    r"|</[^>]*>"
    r'|<(?:[^>"]|"[^"]*")*>'
    r"|[^<]+",
    re.DOTALL,
)
_TAG_NAME_PATTERN = re.compile(r"</?\s*([^\s/>]+)")


class TokenKind(Enum):
    """Kinds of lexical tokens in rendered XML."""

    OPEN = auto()
    CLOSE = auto()
    SELF_CLOSING = auto()
    COMMENT = auto()
    CDATA = auto()
    TEXT = auto()


@dataclass
class _Fragment:
    kind: TokenKind
    raw: str
    name: Optional[str] = None
    close: str = ""
    children: List["_Fragment"] = field(default_factory=list)

    @property
    def is_inline(self) -> bool:
        return self.kind in (TokenKind.TEXT, TokenKind.CDATA)


def _classify(raw: str) -> TokenKind:
    if raw.startswith("<!--"):
        return TokenKind.COMMENT
    if raw.startswith("<![CDATA["):
        return TokenKind.CDATA
    if raw.startswith("</"):
        return TokenKind.CLOSE
    if raw.startswith("<"):
        return TokenKind.SELF_CLOSING if raw.endswith("/>") else TokenKind.OPEN
    return TokenKind.TEXT


def _tag_name(raw: str) -> Optional[str]:
    match = _TAG_NAME_PATTERN.match(raw)
    return match.group(1) if match else None


class XmlFormatter:
    """Indents flat XML text produced by the document model."""

    def __init__(
        self,
        config: Optional[FormatterConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or FormatterConfig()
        self.logger = get_logger(__name__, correlation_id, "xml_formatter")

    def format(self, xml: str) -> str:
        """Return ``xml`` indented, or unchanged if it is not balanced.

        Raw content (see ``EscapePolicy.QUOTES_ONLY``) may contain ``<``; such
        text cannot be re-tokenized reliably and is returned as rendered.
        """
        fragments = self._parse(xml)
        if fragments is None:
            self.logger.warning(
                "Skipping pretty-print of unbalanced XML",
                extra={"length": len(xml)},
            )
            return xml

        lines: List[str] = []
        for fragment in fragments:
            self._emit(fragment, 0, lines)
        return self.config.line_separator.join(lines)

    def _parse(self, xml: str) -> Optional[List[_Fragment]]:
        top: List[_Fragment] = []
        stack: List[_Fragment] = []

        position = 0
        for match in _TOKEN_PATTERN.finditer(xml):
            if match.start() != position:
                return None
            position = match.end()

            raw = match.group(0)
            kind = _classify(raw)
            siblings = stack[-1].children if stack else top

            if kind is TokenKind.CLOSE:
                if not stack or stack[-1].name != _tag_name(raw):
                    return None
                stack.pop().close = raw
            elif kind is TokenKind.OPEN:
                fragment = _Fragment(kind, raw, name=_tag_name(raw))
                siblings.append(fragment)
                stack.append(fragment)
            else:
                siblings.append(_Fragment(kind, raw))

        if stack or position != len(xml):
            return None
        return top

    def _self_closing(self, raw: str) -> str:
        if self.config.whitespace_at_end_of_self_closing and not raw.endswith(" />"):
            return raw[:-2] + " />"
        return raw

    def _emit(self, fragment: _Fragment, depth: int, lines: List[str]) -> None:
        indent = self.config.indentation * depth

        if fragment.kind is TokenKind.TEXT:
            text = fragment.raw.strip()
            if text:
                lines.append(indent + text)
            return
        if fragment.kind is TokenKind.SELF_CLOSING:
            lines.append(indent + self._self_closing(fragment.raw))
            return
        if fragment.kind is not TokenKind.OPEN:
            lines.append(indent + fragment.raw)
            return

        collapse = self.config.collapse_content and all(
            child.is_inline for child in fragment.children
        )
        if collapse:
            body = "".join(child.raw for child in fragment.children)
            lines.append(f"{indent}{fragment.raw}{body}{fragment.close}")
            return

        lines.append(indent + fragment.raw)
        for child in fragment.children:
            self._emit(child, depth + 1, lines)
        lines.append(indent + fragment.close)


def format_xml(xml: str, config: Optional[FormatterConfig] = None) -> str:
    """Indent flat XML text using ``config`` (two spaces by default).

    Text next to element children is stripped of surrounding whitespace and
    moved to its own line; text-only bodies are kept verbatim.
    """
    return XmlFormatter(config).format(xml)
