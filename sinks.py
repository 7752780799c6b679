"""Downstream delivery of a saved MBS JSON file: user command and webhook."""

from __future__ import annotations

import json
import logging
import os
import shlex
import subprocess
import threading
from json import JSONDecodeError
from pathlib import Path

import requests

FILE_PLACEHOLDER = "{file}"
_DEFAULT_WEBHOOK_TIMEOUT_SECONDS = 30

LOGGER = logging.getLogger(__name__)


def webhook_timeout_seconds() -> int:
    return int(os.environ.get("WEBHOOK_TIMEOUT_SECONDS", _DEFAULT_WEBHOOK_TIMEOUT_SECONDS))


class CommandError(RuntimeError):
    pass


class WebhookError(RuntimeError):
    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"webhook failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


def build_command(template: str, json_path: str | Path) -> list[str]:
    """Split the template into argv, then substitute the JSON path for {file}.

    The path is substituted after splitting so it is never parsed as shell syntax.
    """
    argv = [arg.replace(FILE_PLACEHOLDER, str(json_path)) for arg in shlex.split(template)]
    if not argv:
        raise ValueError("empty command")
    return argv


def execute_command(
    template: str,
    json_path: str | Path,
    sync: bool = False,
) -> threading.Thread | None:
    """Run the user command for a freshly written JSON file.

    With sync=True the call blocks and raises CommandError on a non-zero exit.
    Otherwise the process is started in the background and a daemon thread
    logs its outcome; that thread is returned so callers may join it.
    """
    argv = build_command(template, json_path)
    display = shlex.join(argv)

    if sync:
        LOGGER.info("Running command synchronously: %s", display)
        try:
            completed = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise CommandError(f"failed to start command: {exc}") from exc
        if completed.returncode != 0:
            raise CommandError(
                f"command failed with exit code {completed.returncode}\nOutput: {completed.stdout}"
            )
        LOGGER.info("Command completed successfully: %s", display)
        return None

    try:
        process = subprocess.Popen(argv)
    except OSError as exc:
        raise CommandError(f"failed to start command: {exc}") from exc
    LOGGER.info("Started command in background: %s", display)

    waiter = threading.Thread(target=_wait_for_background, args=(process, display), daemon=True)
    waiter.start()
    return waiter


def _wait_for_background(process: subprocess.Popen, display: str) -> None:
    returncode = process.wait()
    if returncode != 0:
        LOGGER.warning("Background command failed with exit code %s: %s", returncode, display)
    else:
        LOGGER.info("Background command completed successfully: %s", display)


def parse_webhook_headers(raw: str | None) -> dict[str, str]:
    """Parse a JSON object of extra webhook headers; empty input means none."""
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except JSONDecodeError as exc:
        raise ValueError(f"failed to parse webhook headers: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ValueError("webhook headers must be a JSON object")
    return {str(key): str(value) for key, value in parsed.items()}


def send_webhook(
    url: str,
    json_path: str | Path,
    headers: dict[str, str] | None = None,
) -> None:
    """POST the JSON file to a webhook, raising WebhookError on a non-2xx reply."""
    payload = Path(json_path).read_bytes()
    request_headers = {"Content-Type": "application/json", **(headers or {})}

    response = requests.post(
        url,
        data=payload,
        headers=request_headers,
        timeout=webhook_timeout_seconds(),
    )
    if not 200 <= response.status_code < 300:
        raise WebhookError(response.status_code, response.text)

    LOGGER.info("Webhook sent successfully to %s", url)
