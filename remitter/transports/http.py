"""HTTP transport.

Sends the formatted event as the body of an HTTP request whose URL is a
template expanded from the event, e.g.
``https://example.com/event/{eventName}/notify``.
"""

import re
from urllib.parse import quote

import httpx
from loguru import logger

from remitter.events import Event, FormattedEvent
from remitter.exceptions import DeliveryError

log = logger.bind(source=__name__)

DEFAULT_TIMEOUT = 10.0

_VARIABLE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

TEMPLATE_VARIABLES = frozenset({"eventName", "event_name", "name", "uid"})
"""Placeholders understood by :class:`HttpTransport` URL templates."""


def expand_template(template: str, event: Event) -> str:
    """Expand ``{var}`` placeholders of *template* with values from *event*.

    Values are percent-encoded so that only unreserved characters survive
    (RFC 6570 simple string expansion).

    Raises:
        ValueError: If the template uses an unknown placeholder.
    """
    values = {
        "eventName": event.name,
        "event_name": event.name,
        "name": event.name,
        "uid": event.uid,
    }

    def substitute(match: re.Match[str]) -> str:
        var = match.group(1)
        if var not in values:
            raise ValueError(f"unknown URL template variable {{{var}}}")
        return quote(values[var], safe="")

    return _VARIABLE.sub(substitute, template)


class HttpTransport:
    """Deliver formatted events over HTTP with httpx.

    Args:
        url: URL template; see :data:`TEMPLATE_VARIABLES`.
        method: HTTP method (default ``POST``).
        headers: Extra request headers. ``content-type`` always comes from
            the formatted event.
        timeout: Request timeout in seconds.
        client: Shared ``httpx.AsyncClient``. When omitted, a client is
            opened per request.

    Raises:
        ValueError: If *url* uses an unknown placeholder.
    """

    def __init__(
        self,
        url: str,
        *,
        method: str = "POST",
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        unknown = set(_VARIABLE.findall(url)) - TEMPLATE_VARIABLES
        if unknown:
            raise ValueError(
                f"unknown URL template variable(s) {sorted(unknown)} in {url!r}"
            )
        self.url = url
        self.method = method.upper()
        self.headers = dict(headers or {})
        self.timeout = timeout
        self._client = client

    def __repr__(self) -> str:
        return f"HttpTransport({self.method} {self.url})"

    async def send(self, formatted: FormattedEvent, event: Event) -> None:
        url = expand_template(self.url, event)
        headers = {**self.headers, "content-type": formatted.content_type}
        try:
            if self._client is not None:
                response = await self._client.request(
                    self.method,
                    url,
                    content=formatted.content,
                    headers=headers,
                    timeout=self.timeout,
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(
                        self.method, url, content=formatted.content, headers=headers
                    )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DeliveryError(
                f"{self.method} {url} returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise DeliveryError(
                f"{self.method} {url} failed: {type(exc).__name__}: {exc}"
            ) from exc
        log.debug(
            "{} {} -> {} (uid={})", self.method, url, response.status_code, event.uid
        )
