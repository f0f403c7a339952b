"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The four status codes this server can produce, with their reason phrases.

    ┌────────────────────────────────────────────────────────────────────┐
    │  Code │ Phrase             │ When                                 │
    ├───────┼────────────────────┼──────────────────────────────────────┤
    │  200  │ OK                 │ File exists (or "/" → index)        │
    │  301  │ Moved Permanently  │ "/" with redirect_root enabled      │
    │  400  │ Bad Request        │ Malformed request line, non-GET     │
    │  404  │ Not Found          │ File missing → not-found document   │
    └────────────────────────────────────────────────────────────────────┘

Anything else is a bug, so looking up an unmapped code raises
UnknownStatus rather than inventing a phrase.

=============================================================================
"""

from enum import IntEnum

from ..errors import UnknownStatus


class HTTPStatus(IntEnum):
    """
    HTTP status codes as an enumeration.

    IntEnum so members compare and format like plain integers:
        HTTPStatus.OK == 200          # True
        f"{HTTPStatus.NOT_FOUND}"     # "404"
    """

    OK = 200
    MOVED_PERMANENTLY = 301
    BAD_REQUEST = 400
    NOT_FOUND = 404

    def __str__(self) -> str:
        return str(self.value)

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 200 OK
                     ─── ──
                      │   └── Reason phrase
                      └────── Status code
        """
        return _STATUS_PHRASES[self]

    @property
    def is_error(self) -> bool:
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
}


def reason_phrase(code: int) -> str:
    """
    Look up the reason phrase for a numeric status code.

    Raises:
        UnknownStatus: If the code is not one of 200, 301, 400, 404.
    """
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        raise UnknownStatus(code) from None
