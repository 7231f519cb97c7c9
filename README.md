# httpdebugproxy

A small reverse HTTP proxy for debugging. It forwards each request to an
upstream server and prints both sides of the exchange to standard output,
in colour: method, path, upstream URL, sorted headers, status and body.

Bodies are shown as follows:

- An empty body is shown as `None`.
- A JSON body is pretty-printed with sorted keys.
- Other UTF-8 text is shown as it is.
- Anything else is shown as bytes.

Timing figures (upstream time, total time and proxy overhead) are logged at
debug level.

## Installation

```
pip install httpdebugproxy
```

## Configuration

The proxy reads a YAML file, `./config.yaml` by default. Set the
`HDP_CONFIG` environment variable to use another path. Before that,
variables are loaded from a `.env` file, found by searching upwards from the
working directory.

```yaml
server:
  host: 127.0.0.1
  port: 8080

upstreams:
  api: http://localhost:9000
  auth: http://localhost:9100

default_upstream: api
```

The `server` section:

- `host` and `port` are required. `port` must be an integer from 0 to 65535.
- `host_v6`, `port_v6`, `api_key`, `ssl_cert` and `ssl_key` are optional.
  They are checked for type, but nothing uses them (see below).

The other keys:

- `upstreams` maps a name to a base URL. At least one upstream is required.
- `default_upstream` names the upstream used when a path does not start with
  an upstream name. It is required when more than one upstream is defined,
  and it must be one of them.

A malformed or inconsistent configuration raises
`httpdebugproxy.config.ConfigError`.

## Routing

The proxy accepts `GET`, `POST`, `PUT`, `PATCH` and `DELETE` on any path.

- If the first path segment names an upstream, that segment is removed and
  the rest of the path goes to that upstream. With the config above,
  `/auth/login` is sent to `http://localhost:9100/login`.
- Any other path goes to the default upstream unchanged. With a single
  upstream, that upstream is the default. For example, `/users/1` is sent to
  `http://localhost:9000/users/1`.

Request headers are forwarded, except these:

- headers whose name starts with `host`;
- `Content-Length` and `Transfer-Encoding`.

The upstream's status, headers and body are returned to the client, except
its `Content-Length` and `Transfer-Encoding` headers, which are recomputed.
Response bodies are passed on without being decompressed.

TLS certificates of upstreams are not checked, and upstream requests have no
timeout. If the upstream cannot be reached, the proxy answers `500` and logs
the failure as an error.

## Running

```
httpdebugproxy
```

To use another configuration file:

```
HDP_CONFIG=/path/to/proxy.yaml httpdebugproxy
```

The command takes no arguments other than `--help`.

Set `HDP_LOG_LEVEL` to control logging. The default is `ERROR`. Use `DEBUG`
to see the timing figures and `INFO` for start-up messages.

The exit status is `0` after an interrupt and `1` if either of these happens:

- the configuration cannot be read or is invalid;
- the address cannot be bound.

## Using it from Python

```python
import asyncio

from httpdebugproxy.config import load_config
from httpdebugproxy.server import create_app, run

config = load_config("config.yaml")
app = create_app(config)   # an aiohttp.web.Application; validates the config
asyncio.run(run(config))   # serves until cancelled or interrupted
```

`httpdebugproxy.handlers` provides the building blocks:

- `resolve_upstream(config, url_path)` returns the upstream name and the
  path to send.
- `describe_body(body)` renders a body for the trace.
- `format_headers(headers)` renders headers for the trace.
- `ProxyHandler` forwards a single request.

## What it does not do

The proxy listens only on `server.host` and `server.port`, over plain HTTP.
The optional `host_v6`, `port_v6`, `api_key`, `ssl_cert` and `ssl_key` keys
are accepted in the configuration but have no effect. The proxy does not:

- listen on a second IPv6 address;
- serve TLS;
- check an API key on incoming requests.

## Development

```
pip install -e ".[test]"
pytest
```