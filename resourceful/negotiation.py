"""
Format negotiation for controller responses.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .exceptions import UnknownFormatError
from .models import Request

logger = logging.getLogger(__name__)

# Format key -> media types that select it
MIME_TYPES: Dict[str, Tuple[str, ...]] = {
    "html": ("text/html", "application/xhtml+xml"),
    "json": ("application/json",),
    "xml": ("application/xml", "text/xml"),
    "text": ("text/plain",),
    "csv": ("text/csv",),
    "js": ("text/javascript", "application/javascript"),
}


def parse_accept(accept_header: str) -> List[Tuple[str, float]]:
    """Parse an Accept header into ``(media_type, quality)`` pairs, best first."""
    entries = []
    for position, part in enumerate(accept_header.split(",")):
        pieces = [p.strip() for p in part.split(";")]
        media_type = pieces[0].lower()
        if not media_type:
            continue
        quality = 1.0
        for param in pieces[1:]:
            if param.startswith("q="):
                try:
                    quality = float(param[2:])
                except ValueError:
                    quality = 0.0
        entries.append((media_type, quality, position))
    # Stable on original position for equal quality
    entries.sort(key=lambda entry: (-entry[1], entry[2]))
    return [(media_type, quality) for media_type, quality, _ in entries]


class FormatNegotiator:
    """Base class for format negotiators.

    A negotiator receives one callback per format and invokes at most one of
    them: the one matching the format the request asked for.
    """

    def supports(self, fmt: str) -> bool:
        """Check whether the transport knows how to produce this format."""
        raise NotImplementedError

    def respond(self, callbacks: Dict[str, Callable[[], Any]]) -> Any:
        """Invoke the callback for the negotiated format and return its result."""
        raise NotImplementedError


class AcceptNegotiator(FormatNegotiator):
    """Negotiates from an explicit format parameter or the Accept header.

    An explicit ``format`` parameter (or a known path extension such as
    ``.json``) wins. Otherwise the Accept header is matched by quality, and a
    wildcard picks the first registered format.
    """

    def __init__(self, request: Request, mime_types: Optional[Dict[str, Tuple[str, ...]]] = None):
        self.request = request
        self.mime_types = dict(MIME_TYPES if mime_types is None else mime_types)
        self.format: Optional[str] = None

    def supports(self, fmt: str) -> bool:
        return fmt in self.mime_types

    def requested_format(self) -> Optional[str]:
        fmt = self.request.get_format()
        if fmt is None:
            return None
        if "format" in self.request.params or fmt in self.mime_types:
            return fmt
        # Unknown extension, e.g. a dotted slug
        return None

    def negotiate(self, available: Sequence[str]) -> str:
        """Pick one of ``available`` for the current request.

        Raises:
            UnknownFormatError: If nothing the request accepts is available.
        """
        explicit = self.requested_format()
        if explicit is not None:
            if explicit in available:
                return explicit
            raise UnknownFormatError(explicit, available)

        accept_header = self.request.get_accept_header()
        for media_type, quality in parse_accept(accept_header):
            if quality <= 0:
                continue
            if media_type == "*/*":
                return available[0]
            for fmt in available:
                candidates = self.mime_types.get(fmt, ())
                if media_type in candidates:
                    return fmt
                if media_type.endswith("/*") and any(
                    c.startswith(media_type[:-1]) for c in candidates
                ):
                    return fmt
        raise UnknownFormatError(accept_header, available)

    def respond(self, callbacks: Dict[str, Callable[[], Any]]) -> Any:
        available = [fmt for fmt in callbacks if self.supports(fmt)]
        if not available:
            raise UnknownFormatError(self.request.get_accept_header(), available)
        self.format = self.negotiate(available)
        logger.debug(f"Negotiated format {self.format} for {self.request.method.value} {self.request.path}")
        return callbacks[self.format]()
