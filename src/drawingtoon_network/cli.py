"""Command-line diagnostics for the Drawingtoon network core."""
from __future__ import annotations

import json
import mimetypes
import os
import time
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import typer

try:  # pragma: no cover - exercised in runtime environments
    from rich import box
    from rich.console import Console
    from rich.table import Table
except ImportError as exc:  # pragma: no cover - optional dependency guard
    raise RuntimeError(
        "The CLI requires Rich for table rendering. Install the CLI extras via "
        "'pip install drawingtoon-network[cli]' to enable this command."
    ) from exc

from .auth.bearer import BearerAuth
from .client import NetworkManager
from .config import DEFAULT_GENERATIVE_ENDPOINT, DEFAULT_IMAGE_MODEL, GenerativeConfig
from .exceptions import DrawingtoonNetworkError
from .http import RawResponse
from .resources.generative import CartoonizeOptions, CartoonStyle, GenerativeImageResource

app = typer.Typer(help="Drawingtoon network diagnostics CLI.", no_args_is_help=True)

gemini_app = typer.Typer(help="Generative image API diagnostics.", no_args_is_help=True)
app.add_typer(gemini_app, name="gemini")

RESPONSE_MODES = ("raw", "json", "string")

console = Console(force_terminal=False, color_system=None)


def _env_flag(name: str, default: bool = True) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off"}


def _build_manager(
    base_url: str | None,
    token: str | None,
    verify_ssl: bool,
    cert_path: Path | None,
    timeout: float,
) -> NetworkManager:
    verify_target: bool | str
    if cert_path:
        expanded_cert = cert_path.expanduser()
        if not expanded_cert.exists():
            raise typer.BadParameter("Certificate file not found for --cert option.")
        if not verify_ssl:
            raise typer.BadParameter("Cannot combine --cert with --no-verify.")
        verify_target = str(expanded_cert)
    else:
        verify_target = verify_ssl

    return NetworkManager(
        base_url=base_url,
        auth_strategy=BearerAuth(token) if token else None,
        verify_ssl=verify_target,
        timeout=timeout,
    )


def _build_generative(
    api_key: str | None,
    model: str,
    endpoint: str,
    timeout: float,
) -> GenerativeImageResource:
    if not api_key:
        raise typer.BadParameter("--api-key (or GEMINI_API_KEY) is required.")
    config = GenerativeConfig(api_key=api_key, model=model, endpoint=endpoint, timeout=timeout)
    return GenerativeImageResource(config)


def parse_pairs(values: Sequence[str], option: str, *, collect: bool = True) -> dict[str, Any]:
    """Parse repeated key=value options.

    Repeated keys collect into a list, or the last value wins when
    ``collect`` is false.
    """
    out: dict[str, Any] = {}
    for raw in values:
        if "=" not in raw:
            raise typer.BadParameter(f"{option} expects key=value, got {raw!r}.")
        key, value = raw.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"{option} expects a non-empty key, got {raw!r}.")
        if key in out and collect:
            existing = out[key]
            out[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            out[key] = value
    return out


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


def _render_raw(response: RawResponse) -> None:
    table = Table(
        title=f"HTTP {response.status_code} {response.request.method} {response.request.url}",
        box=box.SIMPLE,
        show_lines=False,
        header_style="bold cyan",
    )
    table.add_column("Header")
    table.add_column("Value")
    for name, value in sorted(response.headers.items()):
        table.add_row(name, value)
    console.print(table)
    text = response.text
    if text is None:
        typer.echo(f"<{len(response.content)} bytes of binary data>")
    elif text:
        typer.echo(text)


def _handle_error(exc: DrawingtoonNetworkError) -> None:
    if exc.status_code is not None:
        message = f"Request failed (status {exc.status_code}): {exc.describe()}"
    else:
        message = f"Request failed: {exc.describe()}"
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _shared_options() -> dict[str, Any]:  # pragma: no cover - helper indirection
    return {
        "base_url": typer.Option(
            None,
            "--base-url",
            envvar="DRAWINGTOON_BASE_URL",
            help="Base URL that relative request paths are joined onto.",
        ),
        "token": typer.Option(
            None,
            "--token",
            envvar="DRAWINGTOON_TOKEN",
            help="Bearer token sent in the Authorization header.",
        ),
        "verify_ssl": typer.Option(
            _env_flag("DRAWINGTOON_VERIFY_SSL"),
            "--verify/--no-verify",
            envvar="DRAWINGTOON_VERIFY_SSL",
            help="Enable or disable TLS certificate verification.",
            show_default=True,
        ),
        "cert_path": typer.Option(
            None,
            "--cert",
            envvar="DRAWINGTOON_CA_CERT",
            help="Path to a custom CA bundle for TLS verification.",
        ),
        "timeout": typer.Option(30.0, help="Request timeout (seconds).", show_default=True),
        "api_key": typer.Option(
            None,
            "--api-key",
            envvar="GEMINI_API_KEY",
            help="API key for the generative image API.",
        ),
        "model": typer.Option(
            DEFAULT_IMAGE_MODEL,
            "--model",
            envvar="GEMINI_MODEL",
            help="Model identifier used for generateContent.",
            show_default=True,
        ),
        "endpoint": typer.Option(
            DEFAULT_GENERATIVE_ENDPOINT,
            "--endpoint",
            envvar="GEMINI_ENDPOINT",
            help="Generative Language API base endpoint.",
            show_default=True,
        ),
    }


_SHARED_OPTIONS = _shared_options()


@app.command("request")
def request_command(
    url: str = typer.Argument(..., help="Absolute URL, or a path joined onto --base-url."),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
    param: list[str] = typer.Option(
        [], "--param", "-q", help="Query parameter in key=value form.", show_default=False
    ),
    header: list[str] = typer.Option(
        [], "--header", "-H", help="Request header in name=value form.", show_default=False
    ),
    data: str | None = typer.Option(None, "--data", "-d", help="Request body sent as JSON."),
    mode: str = typer.Option(
        "raw", "--mode", "-m", help="Response mode: raw, json or string.", show_default=True
    ),
    encoding: str = typer.Option(
        "utf-8", "--encoding", help="Text encoding for --mode string.", show_default=True
    ),
    base_url: str | None = _SHARED_OPTIONS["base_url"],
    token: str | None = _SHARED_OPTIONS["token"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
) -> None:
    """Send a single request and print the response."""

    mode = mode.lower()
    if mode not in RESPONSE_MODES:
        raise typer.BadParameter("--mode must be one of raw, json or string.")
    parameters = parse_pairs(param, "--param") or None
    headers: Mapping[str, str] = parse_pairs(header, "--header", collect=False)
    body = data.encode("utf-8") if data is not None else None

    try:
        with _build_manager(base_url, token, verify_ssl, cert_path, timeout) as manager:
            if mode == "json":
                _echo_json(
                    manager.request_json(
                        url, method, parameters=parameters, body=body, headers=headers
                    )
                )
            elif mode == "string":
                typer.echo(
                    manager.request_string(
                        url,
                        method,
                        parameters=parameters,
                        body=body,
                        headers=headers,
                        encoding=encoding,
                    )
                )
            else:
                _render_raw(
                    manager.request_raw(
                        url, method, parameters=parameters, body=body, headers=headers
                    )
                )
    except DrawingtoonNetworkError as exc:
        _handle_error(exc)


@gemini_app.command("ping")
def gemini_ping(
    prompt: str = typer.Option("Say: pong (short)", "--prompt", help="Text prompt to send."),
    api_key: str | None = _SHARED_OPTIONS["api_key"],
    model: str = _SHARED_OPTIONS["model"],
    endpoint: str = _SHARED_OPTIONS["endpoint"],
    timeout: float = _SHARED_OPTIONS["timeout"],
) -> None:
    """Send a short text prompt and print the reply."""

    start = time.perf_counter()
    with _build_generative(api_key, model, endpoint, timeout) as resource:
        try:
            reply = resource.text_ping(prompt)
        except DrawingtoonNetworkError as exc:
            _handle_error(exc)
            return
    typer.secho(f"OK ({_elapsed_ms(start)} ms)", fg=typer.colors.GREEN)
    typer.echo(reply)


@gemini_app.command("probe")
def gemini_probe(
    image: Path = typer.Argument(..., exists=True, dir_okay=False, help="Test image file."),
    api_key: str | None = _SHARED_OPTIONS["api_key"],
    model: str = _SHARED_OPTIONS["model"],
    endpoint: str = _SHARED_OPTIONS["endpoint"],
    timeout: float = _SHARED_OPTIONS["timeout"],
) -> None:
    """Send an image and report whether an image comes back."""

    start = time.perf_counter()
    with _build_generative(api_key, model, endpoint, timeout) as resource:
        try:
            has_image = resource.image_probe(image.read_bytes(), mime_type=_guess_mime(image))
        except DrawingtoonNetworkError as exc:
            _handle_error(exc)
            return
    if has_image:
        typer.secho(f"Image response received ({_elapsed_ms(start)} ms)", fg=typer.colors.GREEN)
    else:
        typer.secho(f"No image in response ({_elapsed_ms(start)} ms)", fg=typer.colors.YELLOW)


@gemini_app.command("cartoonize")
def gemini_cartoonize(
    image: Path = typer.Argument(..., exists=True, dir_okay=False, help="Source photo."),
    output: Path = typer.Option(..., "--output", "-o", help="Where to write the result."),
    style: CartoonStyle = typer.Option(CartoonStyle.COMIC, "--style", help="Cartoon style."),
    intensity: float = typer.Option(0.7, "--intensity", help="Effect strength from 0 to 1."),
    api_key: str | None = _SHARED_OPTIONS["api_key"],
    model: str = _SHARED_OPTIONS["model"],
    endpoint: str = _SHARED_OPTIONS["endpoint"],
    timeout: float = _SHARED_OPTIONS["timeout"],
) -> None:
    """Stylize a photo and save the returned image."""

    options = CartoonizeOptions(style=style, intensity=intensity)
    with _build_generative(api_key, model, endpoint, timeout) as resource:
        try:
            result = resource.cartoonize(
                image.read_bytes(), options, mime_type=_guess_mime(image)
            )
        except DrawingtoonNetworkError as exc:
            _handle_error(exc)
            return
    output.write_bytes(result)
    typer.echo(f"Wrote {len(result)} bytes to {output}")


def _guess_mime(path: Path) -> str:
    guessed, _ = mimetypes.guess_type(path.name)
    if guessed and guessed.startswith("image/"):
        return guessed
    return "image/jpeg"
