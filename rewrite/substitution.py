"""
Match/replace primitives used by the rewrite pipeline.

Two modes are provided:
1. Global substitution over the whole body, tags and attributes included
2. Scoped substitution that only rewrites the inner text of every
   ``<[prefix:]Name ...>...</[prefix:]Name>`` element

Matching is regex based rather than parser based. A consequence is that
same-named elements nested inside each other are not scoped correctly: the
non-greedy element pattern stops at the nearest closing tag, so the outer
element's match ends inside the inner one. Self-closing elements carry no
inner text and are never matched.
"""
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from .errors import InvalidPatternError

logger = logging.getLogger(__name__)

# Optional namespace prefix in front of an element name
_NS_PREFIX = r"(?:[A-Za-z_][\w.\-]*:)?"

# First tag, middle, last tag of an already matched element
_ELEMENT_PARTS = re.compile(r"(<[^>]+>)([\s\S]*)(</[^>]+>)")

# $$, $&, $1, $<name> as written in persisted settings documents
_DOLLAR_REFERENCE = re.compile(r"\$(?:(\$)|(&)|(\d{1,2})|<([A-Za-z_]\w*)>)")

@dataclass(frozen=True)
class Substitution:
    """A compiled match/replace step.

    Literal substitutions replace plain text with plain text. Regex
    substitutions hold a compiled pattern and a Python replacement template.
    """
    source: str
    replacement: str
    is_regex: bool = False
    pattern: Optional[re.Pattern] = None

    @property
    def is_noop(self) -> bool:
        return not self.source

    def apply(self, text: str) -> str:
        """Replace every occurrence in ``text``."""
        if self.is_noop or not text:
            return text
        if not self.is_regex:
            return text.replace(self.source, self.replacement)
        try:
            return self.pattern.sub(self.replacement, text)
        except (re.error, IndexError) as e:
            raise InvalidPatternError(self.source, str(e)) from e

def _translate_template(template: str, groups: int) -> str:
    """Rewrite ``$``-style references into Python ``re`` template syntax."""
    def _convert(match: re.Match) -> str:
        dollar, whole, number, name = match.groups()
        if dollar:
            return "$"
        if whole:
            return r"\g<0>"
        if name:
            return rf"\g<{name}>"
        if len(number) == 2 and int(number) > groups:
            return rf"\g<{number[0]}>{number[1]}"
        return rf"\g<{int(number)}>"

    return _DOLLAR_REFERENCE.sub(_convert, template)

@lru_cache(maxsize=256)
def compile_substitution(match_pattern: str, replace_with: str, is_regex: bool) -> Substitution:
    """Compile a rule's match/replace pair.

    Raises:
        InvalidPatternError: If ``is_regex`` is set and the pattern or
            replacement template does not compile
    """
    if not is_regex:
        return Substitution(source=match_pattern, replacement=replace_with)
    try:
        pattern = re.compile(match_pattern)
    except re.error as e:
        raise InvalidPatternError(match_pattern, str(e)) from e
    replacement = _translate_template(replace_with, pattern.groups)
    try:
        # The template is parsed before any matching, so this validates it
        pattern.sub(replacement, "")
    except (re.error, IndexError) as e:
        raise InvalidPatternError(match_pattern, f"bad replacement {replace_with!r}: {e}") from e
    return Substitution(
        source=match_pattern,
        replacement=replacement,
        is_regex=True,
        pattern=pattern
    )

@lru_cache(maxsize=256)
def element_pattern(element_name: str) -> re.Pattern:
    """Pattern matching every non-self-closing ``element_name`` element, any prefix."""
    name = re.escape(element_name)
    return re.compile(
        rf"<{_NS_PREFIX}{name}(?:\s[^>]*)?(?<!/)>"
        rf"[\s\S]*?"
        rf"</{_NS_PREFIX}{name}\s*>"
    )

def global_substitute(body: str, substitution: Substitution) -> str:
    """Apply ``substitution`` across the entire body."""
    return substitution.apply(body)

def scoped_substitute(body: str, element_name: str, substitution: Substitution) -> str:
    """Apply ``substitution`` to the inner text of each ``element_name`` element.

    Tags and attributes are left as they are.
    """
    if substitution.is_noop or not body:
        return body

    def _rewrite_element(match: re.Match) -> str:
        element = match.group(0)
        parts = _ELEMENT_PARTS.fullmatch(element)
        if parts is None:
            return element
        open_tag, content, close_tag = parts.groups()
        return open_tag + substitution.apply(content) + close_tag

    rewritten = element_pattern(element_name).sub(_rewrite_element, body)
    if rewritten != body:
        logger.debug(f"Rewrote content of <{element_name}> elements")
    return rewritten
