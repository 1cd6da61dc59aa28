"""golinks command line client and server launcher.

Usage:
    golinks list
    golinks get jira --options "1234" --options ""
    golinks create --alias jira --destination "https://jira.example.com{/browse/$1}"
    golinks update --alias jira --destination "https://jira.example.com"
    golinks delete jira
    golinks serve --port 8080

Environment variables:
    GOLINKS_API_SERVER: Server to talk to (default: http://localhost:8080)
"""

import argparse
import logging
import sys
from pathlib import Path

import httpx

from golinks.config import VERSION, Config
from golinks.core.errors import GoLinksError
from golinks.redirects.compiler import compile_redirect
from golinks.utilities.logging import setup_logging

logger = logging.getLogger("golinks.cli")

API_PREFIX = "/_gadget/api"


class ApiError(GoLinksError):
    """Raised when the server answers with a non-2xx status."""

    def __init__(self, method: str, url: str, status: int):
        self.method = method
        self.url = url
        self.status = status
        super().__init__(
            f"Request {method} {url} failed with {status}. See debug logs for actual response"
        )


class CertificateError(GoLinksError):
    """Raised when a certificate file does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Certificate {path} does not exist or cannot be read")


class ApiClient:
    """Thin client for the golinks management API.

    Usage:
        with ApiClient("http://localhost:8080") as client:
            client.request("GET", "/redirect")
    """

    def __init__(
        self,
        server_name: str,
        auth: str = "none",
        cert: Path | None = None,
        ca: Path | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.server_name = server_name.rstrip("/")
        kwargs: dict = {"timeout": 10.0}

        if auth == "mtls":
            if cert is None:
                raise GoLinksError("--cert is required with --auth mtls")
            if ca is not None:
                if not ca.exists():
                    raise CertificateError(ca)
                logger.debug("Loading CA from %s", ca)
                kwargs["verify"] = str(ca)
            if not cert.exists():
                raise CertificateError(cert)
            logger.debug("Loading identity from %s", cert)
            kwargs["cert"] = str(cert)

        if transport is not None:
            kwargs["transport"] = transport

        self._client = httpx.Client(**kwargs)

    def request(self, method: str, path: str, body: dict | None = None) -> dict:
        """Send a request and return the decoded JSON body.

        Raises:
            ApiError: If the response status is not 2xx
        """
        url = f"{self.server_name}{API_PREFIX}{path}"
        logger.debug("Request URL is %s", url)

        response = self._client.request(method, url, json=body)
        logger.debug("Response body %r", response.content)

        if not response.is_success:
            raise ApiError(method, url, response.status_code)
        return response.json()

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()


# =============================================================================
# Output
# =============================================================================


def format_table(redirects: list[dict]) -> str:
    """Render redirects as a plain-text table."""
    headers = ("Alias", "Destination", "Created By")
    rows = [
        (
            r["alias"],
            r["destination"],
            (r.get("created_by") or {}).get("username", ""),
        )
        for r in redirects
    ]

    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row)]

    def line(cells) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    output = [line(headers), line("-" * w for w in widths)]
    output.extend(line(row) for row in rows)
    return "\n".join(output)


# =============================================================================
# Commands
# =============================================================================


LIST_PAGE_SIZE = 500


def fetch_all_redirects(client: ApiClient, size: int = LIST_PAGE_SIZE) -> list[dict]:
    """Collect every redirect, following pages until the server reports no more."""
    redirects: list[dict] = []
    page = 0
    while True:
        body = client.request("GET", f"/redirect?page={page}&size={size}")
        redirects.extend(body["redirects"])
        if not body["page"]["has_more"]:
            return redirects
        page += 1


def run_list(client: ApiClient, args: argparse.Namespace) -> None:
    print(format_table(fetch_all_redirects(client)))


def run_get(client: ApiClient, args: argparse.Namespace) -> None:
    body = client.request("GET", f"/redirect/{args.alias}")
    print(f"Redirect target: {body['destination']}")

    compiled = compile_redirect(body["alias"], body["destination"])
    for option in args.options:
        print(f"Evaluating `{option}` => {compiled.evaluate(option)}")


def run_create(client: ApiClient, args: argparse.Namespace) -> None:
    body = client.request(
        "POST",
        "/redirect",
        {"alias": args.alias, "destination": args.destination},
    )
    print(f"Created {body['alias']} => {body['destination']}")


def run_update(client: ApiClient, args: argparse.Namespace) -> None:
    client.request("PUT", f"/redirect/{args.alias}", {"destination": args.destination})
    print(f"Updated {args.alias} => {args.destination}")


def run_delete(client: ApiClient, args: argparse.Namespace) -> None:
    client.request("DELETE", f"/redirect/{args.alias}")
    print(f"Deleted {args.alias}")


def run_serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run(
        "golinks.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_config=None,
    )


COMMANDS = {
    "list": run_list,
    "get": run_get,
    "create": run_create,
    "update": run_update,
    "delete": run_delete,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="golinks", description="Manage go-link redirects")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "--server-name",
        default=Config.API_SERVER,
        help="Server to communicate with (env GOLINKS_API_SERVER)",
    )
    parser.add_argument(
        "--auth",
        choices=["none", "mtls", "x509"],
        default="none",
        help="Authorization for the API (x509 is an alias of mtls)",
    )
    parser.add_argument(
        "--cert",
        type=Path,
        help="PEM file containing BOTH a certificate and key",
    )
    parser.add_argument("--ca", type=Path, help="CA bundle if not a trusted root")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List all the redirects available")

    get_parser = subparsers.add_parser("get", help="Get a single redirect")
    get_parser.add_argument("alias", help="Name of the redirect")
    get_parser.add_argument(
        "--options",
        action="append",
        default=[],
        help="Evaluate the redirect with these arguments (repeatable)",
    )

    for name, help_text in (("create", "Create a redirect"), ("update", "Update a redirect")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--alias", required=True, help="Name of the redirect")
        sub.add_argument("--destination", required=True, help="Where the redirect will send to")

    delete_parser = subparsers.add_parser("delete", help="Delete a redirect")
    delete_parser.add_argument("alias", help="Name of the redirect")

    serve_parser = subparsers.add_parser("serve", help="Run the redirect server")
    serve_parser.add_argument("--host", default=Config.API_HOST)
    serve_parser.add_argument("--port", type=int, default=Config.API_PORT)

    return parser


def main(argv: list[str] | None = None, transport: httpx.BaseTransport | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        setup_logging(log_level="DEBUG" if args.verbose else None)
        run_serve(args)
        return 0

    setup_logging(log_level="DEBUG" if args.verbose else "WARNING", log_to_file=False)
    auth = "mtls" if args.auth == "x509" else args.auth

    try:
        with ApiClient(args.server_name, auth, args.cert, args.ca, transport) as client:
            COMMANDS[args.command](client, args)
    except (GoLinksError, httpx.HTTPError) as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
