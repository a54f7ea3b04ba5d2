"""
Request and response interceptors that apply rewrite rules to proxied traffic.

The proxy decides when a message is intercepted; the interceptor decides
whether its body can be rewritten (text content, not compressed, within the
size limit), runs the rule pipeline and keeps Content-Length consistent.
"""
from abc import ABC
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import logging
import urllib.parse

from .config import RewriteSettings
from .models import Direction
from .pipeline import RewritePipeline
from .store import RuleStore

logger = logging.getLogger(__name__)

@dataclass
class InterceptedRequest:
    """Represents an HTTP request intercepted by the proxy."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    @property
    def parsed_url(self) -> urllib.parse.ParseResult:
        """Parse the URL into its components."""
        return urllib.parse.urlparse(self.url)

    def set_header(self, name: str, value: str) -> None:
        """Set a header value, replacing any existing header of the same name."""
        _set_header(self.headers, name, value)

    def get_header(self, name: str, default: Any = None) -> Any:
        """Get a header value, ignoring case."""
        return _get_header(self.headers, name, default)

@dataclass
class InterceptedResponse:
    """Represents an HTTP response intercepted by the proxy."""
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    def set_header(self, name: str, value: str) -> None:
        """Set a header value, replacing any existing header of the same name."""
        _set_header(self.headers, name, value)

    def get_header(self, name: str, default: Any = None) -> Any:
        """Get a header value, ignoring case."""
        return _get_header(self.headers, name, default)

def _get_header(headers: Dict[str, str], name: str, default: Any = None) -> Any:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return default

def _set_header(headers: Dict[str, str], name: str, value: str) -> None:
    lowered = name.lower()
    for key in list(headers):
        if key.lower() == lowered:
            del headers[key]
    headers[name] = value

class ProxyInterceptor(ABC):
    """Base class for interceptors that can handle both requests and responses."""

    async def intercept_request(self, request: InterceptedRequest) -> InterceptedRequest:
        """Process an intercepted request.

        Override this method to implement request interception.
        """
        return request

    async def intercept_response(self, response: InterceptedResponse, request: InterceptedRequest) -> InterceptedResponse:
        """Process an intercepted response.

        Override this method to implement response interception.
        """
        return response

class RewriteInterceptor(ProxyInterceptor):
    """Applies the rule store's rewrite rules to request and response bodies."""

    # Content types whose bodies are treated as text
    TEXT_CONTENT_TYPES = (
        'text/',
        'application/json',
        'application/xml',
        'application/soap+xml',
        'application/javascript',
        'application/x-www-form-urlencoded'
    )

    def __init__(
        self,
        store: RuleStore,
        settings: Optional[RewriteSettings] = None,
        pipeline: Optional[RewritePipeline] = None
    ):
        """Initialize rewrite interceptor.

        Args:
            store: Rule store read on every intercepted message
            settings: Rewrite settings, defaults to environment settings
            pipeline: Pipeline used to apply rules
        """
        self._store = store
        self._settings = settings or RewriteSettings()
        self._pipeline = pipeline or RewritePipeline()

    def _is_text_content(self, headers: Dict[str, str]) -> bool:
        """Check whether the body should be treated as text based on Content-Type."""
        content_type = (_get_header(headers, 'Content-Type') or '').lower().split(';')[0].strip()
        if not content_type:
            # SOAP clients frequently omit it on raw posts
            return True
        return content_type.startswith(self.TEXT_CONTENT_TYPES) or content_type.endswith('+xml')

    @staticmethod
    def _charset(headers: Dict[str, str]) -> str:
        content_type = _get_header(headers, 'Content-Type') or ''
        for param in content_type.split(';')[1:]:
            key, _, value = param.partition('=')
            if key.strip().lower() == 'charset' and value.strip():
                return value.strip().strip('"')
        return 'utf-8'

    def _rewrite_body(
        self,
        body: Optional[bytes],
        headers: Dict[str, str],
        direction: Direction,
        description: str
    ) -> Optional[bytes]:
        """Rewrite a message body.

        The body is returned untouched when it is not eligible for rewriting.
        """
        if not body or not self._settings.allows(direction):
            return body
        if len(body) > self._settings.max_body_size:
            logger.debug(f"Skipping rewrite of {description}: body of {len(body)} bytes exceeds limit")
            return body
        encoding = (_get_header(headers, 'Content-Encoding') or 'identity').lower()
        if encoding != 'identity':
            logger.debug(f"Skipping rewrite of {description}: content encoding {encoding}")
            return body
        if not self._is_text_content(headers):
            return body

        charset = self._charset(headers)
        try:
            text = body.decode(charset)
        except (LookupError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping rewrite of {description}: cannot decode body as {charset}: {e}")
            return body

        rules = self._store.list()
        result = self._pipeline.run(text, rules, direction)
        if not result.changed:
            return body

        labels = {rule.id: rule.label for rule in rules}
        names = [labels.get(rule_id, rule_id) for rule_id in result.changed_rule_ids]
        try:
            rewritten = result.body.encode(charset)
        except UnicodeEncodeError as e:
            logger.warning(
                f"Discarding rewrite of {description} by {', '.join(names)}: "
                f"result cannot be encoded as {charset}: {e}"
            )
            return body

        logger.info(f"Applied rewrite rules to {description}: {', '.join(names)}")
        return rewritten

    @staticmethod
    def _update_length(headers: Dict[str, str], original: Optional[bytes], body: Optional[bytes]) -> None:
        if body is original or _get_header(headers, 'Content-Length') is None:
            return
        _set_header(headers, 'Content-Length', str(len(body or b'')))

    async def intercept_request(self, request: InterceptedRequest) -> InterceptedRequest:
        """Rewrite the request body before it is forwarded."""
        original = request.body
        request.body = self._rewrite_body(
            original, request.headers, Direction.REQUEST,
            f"request {request.method} {request.url}"
        )
        self._update_length(request.headers, original, request.body)
        return request

    async def intercept_response(self, response: InterceptedResponse, request: InterceptedRequest) -> InterceptedResponse:
        """Rewrite the response body before it is returned to the client."""
        original = response.body
        response.body = self._rewrite_body(
            original, response.headers, Direction.RESPONSE,
            f"response {response.status_code} from {request.url}"
        )
        self._update_length(response.headers, original, response.body)
        return response
