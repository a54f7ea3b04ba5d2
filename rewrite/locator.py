"""
Simplified element-path resolution.

A locator such as ``//Customer/Name`` or ``/soap:Envelope/soap:Body/m:Item[1]``
is reduced to the bare name of its final element. Nothing is checked against
the document's hierarchy: the result is only ever used as a tag name, so a
final step that is not an element (``@id``, ``*``, ``text()``) simply never
matches a tag.
"""
from typing import Optional

from .errors import UnresolvableLocatorError

def resolve_locator(path: Optional[str]) -> Optional[str]:
    """Resolve a locator path to a bare element name.

    Args:
        path: Path-like string, e.g. ``/Envelope/Body/Response``

    Returns:
        The final step without namespace prefix or predicate, or None when
        nothing is left of it.
    """
    if not path:
        return None

    segments = [segment.strip() for segment in path.split("/")]
    segments = [segment for segment in segments if segment]
    if not segments:
        return None

    name = segments[-1]

    # Predicate first so a colon inside [..] is not taken for a prefix
    name = name.partition("[")[0]
    if ":" in name:
        name = name.partition(":")[2]

    return name.strip() or None

def require_element_name(path: str) -> str:
    """Resolve a locator, raising UnresolvableLocatorError when it cannot be resolved."""
    name = resolve_locator(path)
    if name is None:
        raise UnresolvableLocatorError(path)
    return name
