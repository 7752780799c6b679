"""MBS XML download, version tracking and JSON output."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

import requests

from models import NormalizationReport
from normalizer import normalize_document, serialize_record_set
from xml_convert import extract_items_document, xml_to_tree

_DEFAULT_DOWNLOAD_PATH = "downloads"
_DEFAULT_REQUEST_TIMEOUT_SECONDS = 60

_MBS_DATE_RE = re.compile(r"MBS-XML-(\d{8})\.XML", re.IGNORECASE)

LOGGER = logging.getLogger(__name__)


def request_timeout_seconds() -> int:
    return int(os.environ.get("MBS_REQUEST_TIMEOUT_SECONDS", _DEFAULT_REQUEST_TIMEOUT_SECONDS))


def extract_mbs_date(link: str) -> str:
    """Return the YYYYMMDD release date embedded in an MBS XML file name."""
    match = _MBS_DATE_RE.search(link)
    if match is None:
        raise ValueError(f"no date found in XML link: {link}")
    return match.group(1)


def has_latest_version(mbs_date: str, download_dir: str | Path | None = None) -> bool:
    """Return True if the JSON output for this release date was already written."""
    return json_output_path(mbs_date, download_dir).is_file()


def json_output_path(mbs_date: str, download_dir: str | Path | None = None) -> Path:
    directory = download_dir or os.environ.get("MBS_DOWNLOAD_PATH", _DEFAULT_DOWNLOAD_PATH)
    return Path(directory) / f"mbs_{mbs_date}.json"


def download_xml(url: str) -> bytes:
    LOGGER.info("Downloading XML from: %s", url)
    response = requests.get(url, timeout=request_timeout_seconds())
    response.raise_for_status()
    LOGGER.info("Downloaded XML (%s bytes)", len(response.content))
    return response.content


def convert_and_save(
    xml_bytes: bytes,
    mbs_date: str,
    download_dir: str | Path | None = None,
) -> tuple[Path, NormalizationReport]:
    """Convert, normalize and write one MBS release.

    Raises StructuralError before anything is written if the XML cannot be
    turned into a non-empty item list.
    """
    document = extract_items_document(xml_to_tree(xml_bytes))
    result = normalize_document(document)
    log_report(result.report)

    path = json_output_path(mbs_date, download_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_record_set(result.record_set), encoding="utf-8")
    LOGGER.info("Saved JSON data to: %s", path)
    return path, result.report


def log_report(report: NormalizationReport) -> None:
    LOGGER.info(
        "Found %s unique fields across all items: %s",
        len(report.field_union),
        sorted(report.field_union),
    )
    for rejection in report.rejections:
        if rejection.field is None:
            LOGGER.warning("Skipping item at index %s: %s", rejection.index, rejection.reason)
        else:
            LOGGER.warning(
                "Skipping item at index %s: %s '%s'",
                rejection.index,
                rejection.reason,
                rejection.field,
            )
    LOGGER.info(
        "Normalization completed: kept=%s dropped=%s total=%s fields_per_item=%s",
        report.kept,
        report.dropped,
        report.total,
        len(report.field_union),
    )
