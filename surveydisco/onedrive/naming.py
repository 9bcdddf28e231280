"""Deterministic folder and template names derived from project fields."""

from __future__ import annotations

import re

MAX_NAME_LENGTH = 200  # leaves room for the root folder prefix

_INVALID_CHARS_RE = re.compile(r'[<>:"/\\|?*#%&{}+~]')
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_name(name: str | None) -> str:
    """Make ``name`` safe as a single OneDrive path segment.

    Idempotent: ``sanitize_name(sanitize_name(x)) == sanitize_name(x)``.
    """
    if not name:
        return "Untitled"

    cleaned = _INVALID_CHARS_RE.sub("-", name)
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()
    cleaned = cleaned[:MAX_NAME_LENGTH]
    # Truncation can expose a new trailing dot or space
    cleaned = cleaned.rstrip(" .").strip()
    return cleaned or "Untitled"


def derive_folder_name(
    job_number: str | None = None,
    client_name: str | None = None,
    geo_address: str | None = None,
    project_id: int | str | None = None,
) -> str:
    """First applicable rule wins: job+address, job+client, job+"Project", "Project-{id}"."""
    if job_number and geo_address and geo_address.strip():
        raw = f"{job_number} - {geo_address.strip()}"
    elif job_number and client_name:
        raw = f"{job_number} - {client_name}"
    elif job_number:
        raw = f"{job_number} - Project"
    else:
        raw = f"Project-{project_id}"
    return sanitize_name(raw)


def folder_path(root_folder: str, folder_name: str) -> str:
    return f"{root_folder}/{folder_name}"


def template_file_name(job_number: str | None, geo_address: str | None, extension: str) -> str:
    """``"{job} - {street}{ext}"`` using the first comma-separated part of the address."""
    street = geo_address.split(",")[0].strip() if geo_address else ""
    stem = f"{job_number} - {street}" if street else f"{job_number} - Project"
    return sanitize_name(f"{stem}{extension}")
