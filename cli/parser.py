"""Command parser for CLI input."""

import shlex

from cli.models import (
    CommandRequest,
    DeleteCommand,
    DownloadCommand,
    ListCommand,
    LoginCommand,
    StatsCommand,
    UploadCommand,
    UriCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]
    args = tokens[1:]

    if command_name in ("list", "ls"):
        return _parse_list(args)
    elif command_name == "upload":
        return _parse_upload(args)
    elif command_name == "download":
        return _parse_download(args)
    elif command_name in ("delete", "rm"):
        return _parse_delete(args)
    elif command_name == "uri":
        return _parse_uri(args)
    elif command_name == "stats":
        return _parse_stats(args)
    elif command_name == "login":
        return _parse_login(args)
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _parse_list(args: list[str]) -> ListCommand:
    if args:
        raise ParseError("list takes no arguments")
    return ListCommand()


def _parse_upload(args: list[str]) -> UploadCommand:
    """Parse 'upload <file_path> [object_name]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("upload requires 1 or 2 arguments: <file_path> [object_name]")

    file_path = args[0]
    object_name = args[1] if len(args) > 1 else None
    return UploadCommand(file_path=file_path, object_name=object_name)


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <object_name> [output_path]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("download requires 1 or 2 arguments: <object_name> [output_path]")

    object_name = args[0]
    output_path = args[1] if len(args) > 1 else None
    return DownloadCommand(object_name=object_name, output_path=output_path)


def _parse_delete(args: list[str]) -> DeleteCommand:
    """Parse 'delete <object_name>...' command."""
    if not args:
        raise ParseError("delete requires at least one object name")

    return DeleteCommand(object_names=tuple(args))


def _parse_uri(args: list[str]) -> UriCommand:
    if len(args) != 1:
        raise ParseError("uri requires exactly 1 argument: <object_name>")

    return UriCommand(object_name=args[0])


def _parse_stats(args: list[str]) -> StatsCommand:
    if args:
        raise ParseError("stats takes no arguments")
    return StatsCommand()


def _parse_login(args: list[str]) -> LoginCommand:
    """Parse 'login <username> <password>' command."""
    if len(args) != 2:
        raise ParseError("login requires exactly 2 arguments: <username> <password>")

    username, password = args
    return LoginCommand(username=username, password=password)
