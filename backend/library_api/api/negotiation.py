"""Response-shape negotiation from the ``Accept`` header."""

from __future__ import annotations

import enum

from werkzeug.datastructures import MIMEAccept
from werkzeug.http import parse_accept_header

DEFAULT_HYPERMEDIA_MEDIA_TYPE = "application/vnd.library.hateoas+json"


class ResponseShape(enum.Enum):
    PLAIN = "plain"
    HYPERMEDIA = "hypermedia"


def resolve_response_shape(
    accept: str | None, hypermedia_media_type: str = DEFAULT_HYPERMEDIA_MEDIA_TYPE
) -> ResponseShape:
    """
    Pick the response shape for a request.

    Hypermedia is chosen only when ``accept`` names ``hypermedia_media_type``
    exactly (case-insensitive, parameters ignored) with a non-zero quality.
    Wildcards such as ``*/*`` or ``application/*`` select the plain shape.

    :param accept: Raw ``Accept`` header value.
    :type accept: str | None
    :param hypermedia_media_type: Vendor media type enabling links.
    :type hypermedia_media_type: str
    :returns: Negotiated shape.
    :rtype: ResponseShape
    """
    if not accept:
        return ResponseShape.PLAIN
    wanted = hypermedia_media_type.lower()
    for value, quality in parse_accept_header(accept, MIMEAccept):
        if quality > 0 and value.split(";", 1)[0].strip().lower() == wanted:
            return ResponseShape.HYPERMEDIA
    return ResponseShape.PLAIN
