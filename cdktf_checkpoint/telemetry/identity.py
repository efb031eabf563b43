"""Stable anonymous identifiers persisted as small JSON files.

Two scopes exist: the project (``<project>/cdktf.json``, key ``projectId``)
and the user (``~/.cdktf/config.json``, key ``userId``). Once written, an
identifier is reused until someone deletes the file or the key. Writes are not
locked; concurrent writers race and the last one wins.
"""
from __future__ import annotations

import json
import logging
import os
import uuid
from typing import Protocol

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = "cdktf.json"
PROJECT_ID_KEY = "projectId"

USER_CONFIG_DIR = ".cdktf"
USER_CONFIG_FILE = "config.json"
USER_ID_KEY = "userId"

COMMENT_KEY = "//"

USER_ID_COMMENT = (
    "This signature is a randomly generated UUID used to anonymously differentiate "
    "users in telemetry data order to inform product direction. \n"
    "This signature is random, it is not based on any personally identifiable information. \n"
    "To create a new signature, you can simply delete this file at any time.\n"
    "See https://github.com/hashicorp/terraform-cdk/blob/main/docs/working-with-cdk-for-terraform/telemetry.md for more\n"
    "information on how to disable it."
)


def _load_object(file_path: str) -> dict | None:
    """Return the file's JSON object, or None if missing or not an object."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.debug("No usable identity file at %s: %s", file_path, e)
        return None
    return data if isinstance(data, dict) else None


def _write_object(file_path: str, data: dict) -> None:
    parent = os.path.dirname(file_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def get_or_create_identifier(
    file_path: str,
    key: str,
    explanatory_comment: str | None = None,
) -> str:
    """Return the identifier stored under ``key`` in ``file_path``, creating it if needed.

    Args:
        file_path: JSON file holding the identifier.
        key: Field name of the identifier inside the JSON object.
        explanatory_comment: Written under ``"//"`` (newlines flattened to
            spaces) only when the file is created from scratch.

    Returns:
        The existing identifier, or a freshly generated UUID4.

    Raises:
        OSError: The file could not be written.
    """
    new_id = str(uuid.uuid4())
    existing = _load_object(file_path)

    if existing is None:
        fresh: dict[str, str] = {}
        if explanatory_comment:
            fresh[COMMENT_KEY] = explanatory_comment.replace("\n", " ")
        fresh[key] = new_id
        _write_object(file_path, fresh)
        return new_id

    if existing.get(key):
        return existing[key]

    _write_object(file_path, {**existing, key: new_id})
    return new_id


def read_identifier(file_path: str, key: str) -> str | None:
    """Look up an identifier without creating anything."""
    existing = _load_object(file_path)
    if existing is None:
        return None
    return existing.get(key) or None


def project_id_path(project_dir: str | None = None) -> str:
    return os.path.join(os.path.abspath(project_dir or os.getcwd()), PROJECT_CONFIG_FILE)


def user_id_path(home_dir: str | None = None) -> str:
    home = home_dir or os.path.expanduser("~")
    return os.path.join(os.path.abspath(home), USER_CONFIG_DIR, USER_CONFIG_FILE)


def get_project_id(project_dir: str | None = None) -> str:
    return get_or_create_identifier(project_id_path(project_dir), PROJECT_ID_KEY)


def get_user_id(home_dir: str | None = None) -> str:
    return get_or_create_identifier(user_id_path(home_dir), USER_ID_KEY, USER_ID_COMMENT)


class IdentityStore(Protocol):
    """Get-or-create source of the anonymous user and project identifiers."""

    def user_id(self) -> str: ...

    def project_id(self) -> str: ...


class FileIdentityStore:
    """Identifiers kept in cdktf.json and ~/.cdktf/config.json."""

    def __init__(self, project_dir: str | None = None, home_dir: str | None = None) -> None:
        self.project_dir = project_dir
        self.home_dir = home_dir

    def user_id(self) -> str:
        return get_user_id(self.home_dir)

    def project_id(self) -> str:
        return get_project_id(self.project_dir)


class MemoryIdentityStore:
    """In-process identifiers; each one is generated on first use and then fixed."""

    def __init__(self, user_id: str | None = None, project_id: str | None = None) -> None:
        self._ids: dict[str, str] = {}
        if user_id:
            self._ids[USER_ID_KEY] = user_id
        if project_id:
            self._ids[PROJECT_ID_KEY] = project_id

    def _get_or_create(self, key: str) -> str:
        if key not in self._ids:
            self._ids[key] = str(uuid.uuid4())
        return self._ids[key]

    def user_id(self) -> str:
        return self._get_or_create(USER_ID_KEY)

    def project_id(self) -> str:
        return self._get_or_create(PROJECT_ID_KEY)
