"""
Output helpers: console JSON/table, JSON file and per-job text files.

All functions take plain (camelCase) dicts as produced by
JobPosting.to_plain / ScrapeResult.to_plain.
"""

from __future__ import annotations

import json
import logging
import os
import re
import unicodedata
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("json", "table")
TABLE_COLUMNS = [
    ("id", "id"),
    ("title", "title"),
    ("company", "company"),
    ("type", "jobType"),
    ("location", "location"),
    ("modality", "modality"),
    ("remote", "remote"),
    ("publishedAt", "publishedAt"),
    ("salary", "salary"),
]


def yes_no(value: Any) -> str:
    return "Sí" if value else "No"


def to_json(result: Dict[str, Any]) -> str:
    return json.dumps(result, indent=2, ensure_ascii=False)


def build_table(jobs: List[Dict[str, Any]]) -> Table:
    table = Table(show_lines=False)
    for header, _ in TABLE_COLUMNS:
        table.add_column(header, overflow="fold")
    for job in jobs:
        row = []
        for _, key in TABLE_COLUMNS:
            value = job.get(key)
            row.append(yes_no(value) if key == "remote" else str(value or ""))
        table.add_row(*row)
    return table


def format_result(result: Dict[str, Any], fmt: str = "json", console: Optional[Console] = None) -> None:
    """Print a result to the console as JSON or as a table."""
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown format: {fmt}")

    if fmt == "table":
        (console or Console()).print(build_table(result.get("jobs", [])))
        return

    print(to_json(result))


def write_output(filepath: Optional[str], result: Dict[str, Any]) -> Optional[str]:
    """Write the result as JSON, creating parent directories. Returns the path written."""
    if not filepath:
        return None
    target = os.path.abspath(filepath)
    os.makedirs(os.path.dirname(target), exist_ok=True)
    with open(target, "w", encoding="utf-8") as f:
        f.write(to_json(result) + "\n")
    logger.info("Result written to %s", target)
    return target


def sanitize_filename(value: str) -> str:
    """ASCII-only, dash-separated, lowercase file stem."""
    value = unicodedata.normalize("NFKD", value or "")
    value = re.sub(r"[^a-zA-Z0-9\-_]", "-", value)
    value = re.sub(r"-+", "-", value)
    return value.strip("-").lower()


def _or_nd(value: Any) -> str:
    return str(value) if value not in (None, "") else "N/D"


def _joined(values: Optional[List[str]]) -> str:
    return ", ".join(values) if values else "N/A"


def format_job_as_text(job: Dict[str, Any]) -> str:
    """Human-readable summary of one job, one labelled field per line."""
    parts = [
        f"Título: {job.get('title', '')}",
        f"Empresa: {_or_nd(job.get('company'))}",
        f"Tipo: {_or_nd(job.get('jobType'))}",
        f"Ubicación: {_or_nd(job.get('location'))}",
        f"Modalidad: {_or_nd(job.get('modality'))}",
        f"Remoto: {yes_no(job.get('remote'))}",
        f"Publicado: {_or_nd(job.get('publishedAt'))}",
        f"Salario: {_or_nd(job.get('salary'))}",
        f"Badges: {_joined(job.get('badges'))}",
        f"Beneficios: {_joined(job.get('perks'))}",
        f"Link: {job.get('link', '')}",
    ]
    if job.get("companySite"):
        parts.append(f"Sitio web: {job['companySite']}")
    if job.get("applyUrl"):
        parts.append(f"Postular: {job['applyUrl']}")
    parts.append(f"Descripción: {_or_nd(job.get('description'))}")
    if job.get("detailText"):
        parts.append("")
        parts.append("Detalle:")
        parts.append(job["detailText"])
    if job.get("companyLogoAscii"):
        parts.append("")
        parts.append(job["companyLogoAscii"])
    return "\n".join(parts) + "\n"


def write_txt_files(directory: Optional[str], jobs: List[Dict[str, Any]]) -> Optional[str]:
    """Write one <id>.txt per job. Returns the directory written to."""
    if not directory or not jobs:
        return None
    target_dir = os.path.abspath(directory)
    os.makedirs(target_dir, exist_ok=True)

    for job in jobs:
        stem = sanitize_filename(job.get("id") or job.get("title") or "job") or "job"
        with open(os.path.join(target_dir, f"{stem}.txt"), "w", encoding="utf-8") as f:
            f.write(format_job_as_text(job))

    logger.info("Text files written to %s", target_dir)
    return target_dir
