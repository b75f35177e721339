"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class ListCommand:
    """List every stored object."""

    command: Literal["list"] = "list"


@dataclass(frozen=True)
class UploadCommand:
    """Upload a local file, optionally under a different object name."""

    file_path: str
    object_name: str | None = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class DownloadCommand:
    """Download an object to a local path."""

    object_name: str
    output_path: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete one or more objects."""

    object_names: tuple[str, ...]
    command: Literal["delete"] = "delete"


@dataclass(frozen=True)
class UriCommand:
    """Show the decoded chunk URI payload of an object."""

    object_name: str
    command: Literal["uri"] = "uri"


@dataclass(frozen=True)
class StatsCommand:
    """Show catalog totals from the CDN dump."""

    command: Literal["stats"] = "stats"


@dataclass(frozen=True)
class LoginCommand:
    """Store Basic Auth credentials."""

    username: str
    password: str
    command: Literal["login"] = "login"


CommandRequest = (
    ListCommand
    | UploadCommand
    | DownloadCommand
    | DeleteCommand
    | UriCommand
    | StatsCommand
    | LoginCommand
)
