"""Forwarding of incoming requests to upstreams, with a readable trace."""

from __future__ import annotations

import asyncio
import itertools
import json
import logging
import time
from typing import Any

import aiohttp
from aiohttp import web
from termcolor import colored

from .config import Config, ConfigError

log = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

_SEPARATOR = "-" * 40
_DIVIDER = "=" * 40
# The body is fully buffered, so framing headers are recomputed on each hop.
_FRAMING_HEADERS = frozenset({"content-length", "transfer-encoding"})


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def describe_body(body: bytes) -> str:
    """Describe a body as JSON, text or binary for the trace."""
    body = bytes(body)
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        return f"Binary: {body!r}"
    if not text:
        return "None"
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return f"UTF-8 string: {text}"
    return "JSON:\n" + json.dumps(value, indent=2, ensure_ascii=False, sort_keys=True)


def _header_value_text(value: str) -> str:
    if all(char == "\t" or " " <= char <= "~" for char in value):
        return value
    return "N/A"


def format_headers(headers: Any) -> str:
    """Render headers as a sorted, comma separated list of quoted pairs."""
    pairs = headers.items() if hasattr(headers, "items") else headers
    rendered = sorted(
        f'"{str(name).lower()}: {_header_value_text(str(value))}"' for name, value in pairs
    )
    return ", ".join(rendered)


def _fallback_upstream(config: Config) -> str | None:
    if not config.upstreams:
        raise ConfigError("No upstreams defined")
    if len(config.upstreams) > 1:
        return config.default_upstream
    return next(iter(config.upstreams))


def resolve_upstream(config: Config, url_path: str) -> tuple[str | None, str]:
    """Pick the upstream for a request path and the path to send it.

    The first path segment selects an upstream by name; otherwise the default
    (or only) upstream receives the whole path.
    """
    if not url_path:
        return _fallback_upstream(config), ""
    prefix, _, suffix = url_path.partition("/")
    if prefix in config.upstreams:
        return prefix, f"/{suffix}" if suffix else ""
    return _fallback_upstream(config), f"/{url_path}"


def _failure_trace(
    connection_id: int, method: str, path: str, headers: str, body: str, reason: str
) -> str:
    return (
        f"[N/A] Request {connection_id}\n\n-> {method} {path}\n{_SEPARATOR}\n"
        f"Request headers: {headers}\n{_SEPARATOR}\nRequest data: {body}\n"
        f"{_DIVIDER}\n{reason}\n"
    )


class ProxyHandler:
    """Forwards each request to its upstream and prints both sides of the exchange."""

    def __init__(self, config: Config, session: aiohttp.ClientSession) -> None:
        self.config = config
        self.session = session
        self._connection_ids = itertools.count(1)

    async def handle(self, request: web.Request) -> web.StreamResponse:
        start = time.perf_counter()
        connection_id = next(self._connection_ids)

        method = request.method
        request_headers = format_headers(request.headers)
        request_body = await request.read()
        request_body_text = describe_body(request_body)

        upstream_name, upstream_path = resolve_upstream(
            self.config, request.match_info.get("url_path", "")
        )

        if upstream_name is None:
            log.error(
                _failure_trace(
                    connection_id, method, upstream_path, request_headers,
                    request_body_text, "Upstream not found",
                )
            )
            return web.Response(status=404, text="Upstream not found")

        upstream_url = f"{self.config.upstreams[upstream_name]}{upstream_path}"

        if method not in SUPPORTED_METHODS:
            message = f"Method {method} is not supported"
            log.error(
                _failure_trace(
                    connection_id, method, upstream_path, request_headers,
                    request_body_text, message,
                )
            )
            return web.Response(status=500, text=message)

        forwarded = [
            (name, value)
            for name, value in request.headers.items()
            if not name.lower().startswith("host") and name.lower() not in _FRAMING_HEADERS
        ]

        proxy_started = time.perf_counter()
        try:
            async with self.session.request(
                method, upstream_url, headers=forwarded, data=request_body
            ) as response:
                proxy_sent = time.perf_counter()
                try:
                    response_body = await response.read()
                except aiohttp.ClientError:
                    response_body = b""
                status = response.status
                status_text = f"{status} {response.reason or ''}".rstrip()
                response_url = str(response.url)
                response_headers = list(response.headers.items())
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            log.error(
                _failure_trace(
                    connection_id, method, upstream_path, request_headers,
                    request_body_text, f"Error proxying to upstream: {exc}",
                )
            )
            return web.Response(status=500)

        status_colour = "light_green" if status == 200 else "light_magenta"
        print(
            f"[{upstream_name}] Request {connection_id}\n\n"
            f"{colored(method, 'light_cyan')} {colored(upstream_path, 'white')} -> {upstream_url}\n"
            f"{_SEPARATOR}\n"
            f"Request headers: {colored(request_headers, 'green')}\n"
            f"{_SEPARATOR}\n"
            f"Request data: {colored(request_body_text, 'light_yellow')}\n"
            f"{_DIVIDER}\n"
            f"{colored(status_text, status_colour)} <- {response_url}\n"
            f"{_SEPARATOR}\n"
            f"Response headers: {colored(format_headers(response_headers), 'green')}\n"
            f"{_SEPARATOR}\n"
            f"Response data: {colored(describe_body(response_body), 'light_yellow')}\n"
        )

        client_headers = {
            name.lower(): value
            for name, value in response_headers
            if name.lower() not in _FRAMING_HEADERS
        }
        client_response = web.Response(status=status, body=response_body, headers=client_headers)

        total_time = time.perf_counter() - start
        proxy_time = proxy_sent - proxy_started
        overhead_time = total_time - proxy_time
        overhead_percentage = 100.0 - (proxy_time / total_time * 100.0 if total_time else 0.0)
        log.debug(
            "[%s] Request %d OK\n\nProxy: %.6fs\nTotal: %.6fs\nOverhead: %.6fs (%.2f%%)\n",
            upstream_name,
            connection_id,
            proxy_time,
            total_time,
            overhead_time,
            overhead_percentage,
        )
        return client_response