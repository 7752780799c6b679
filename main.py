"""CLI entrypoint: fetch an MBS XML release, normalize it, and notify consumers."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import requests
from dotenv import load_dotenv

from mbs_feed import convert_and_save, download_xml, extract_mbs_date, has_latest_version
from sinks import CommandError, WebhookError, execute_command, parse_webhook_headers, send_webhook

LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(
        description="Download the MBS XML release, convert it to normalized JSON and hand it on"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--xml-url",
        default=os.getenv("MBS_XML_URL"),
        help="URL of the MBS-XML-YYYYMMDD.XML file (defaults to $MBS_XML_URL)",
    )
    source.add_argument(
        "--xml-file",
        type=Path,
        default=None,
        help="Convert a local MBS-XML-YYYYMMDD.XML file instead of downloading",
    )
    parser.add_argument(
        "--exec",
        dest="exec_cmd",
        default="",
        help="Command to execute when a new file is written. Use {file} as placeholder for the JSON path",
    )
    parser.add_argument("--webhook", default="", help="URL to POST the JSON file to when a new file is written")
    parser.add_argument(
        "--webhook-headers",
        default="",
        help='JSON object of headers for the webhook request, e.g. \'{"Authorization":"Bearer token"}\'',
    )
    parser.add_argument("--force", action="store_true", help="Process the release even if it was already downloaded")
    parser.add_argument(
        "--sync",
        action="store_true",
        help="Run the exec command synchronously instead of in the background",
    )
    parser.add_argument(
        "--download-dir",
        default=os.getenv("MBS_DOWNLOAD_PATH"),
        help="Output directory (defaults to $MBS_DOWNLOAD_PATH, then ./downloads)",
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> Path | None:
    """Run one sync cycle. Returns the written JSON path, or None when skipped."""
    if args.xml_file is not None:
        source_name = args.xml_file.name
    elif args.xml_url:
        source_name = args.xml_url
    else:
        raise ValueError("no XML source given: pass --xml-url, --xml-file or set MBS_XML_URL")

    mbs_date = extract_mbs_date(source_name)
    if has_latest_version(mbs_date, args.download_dir) and not args.force:
        LOGGER.info("Already have MBS version %s, skipping (use --force to override)", mbs_date)
        return None

    if args.xml_file is not None:
        xml_bytes = args.xml_file.read_bytes()
    else:
        xml_bytes = download_xml(args.xml_url)

    json_path, report = convert_and_save(xml_bytes, mbs_date, args.download_dir)
    LOGGER.info("MBS version %s: wrote %s items to %s", mbs_date, report.kept, json_path)

    if args.exec_cmd:
        try:
            execute_command(args.exec_cmd, json_path, sync=args.sync)
        except (CommandError, ValueError) as exc:
            LOGGER.warning("Command execution failed: %s", exc)

    if args.webhook:
        try:
            headers = parse_webhook_headers(args.webhook_headers)
            send_webhook(args.webhook, json_path, headers=headers)
        except (WebhookError, ValueError, requests.RequestException) as exc:
            LOGGER.warning("Webhook failed: %s", exc)

    return json_path


def main() -> None:
    """Initialize config and execute one sync cycle."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args()

    # StructuralError is a ValueError; requests errors are OSErrors.
    try:
        json_path = run(args)
    except (ValueError, OSError) as exc:
        LOGGER.error("MBS sync failed: %s", exc)
        sys.exit(1)

    if json_path is not None:
        print(f"Successfully downloaded and converted MBS data to {json_path}")


if __name__ == "__main__":
    main()
