"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from cli.config import Config
from cli.gateway_client import GatewayClient
from cli.models import (
    DeleteCommand,
    DownloadCommand,
    ListCommand,
    LoginCommand,
    StatsCommand,
    UploadCommand,
    UriCommand,
)
from common.logging_config import get_logger

logger = get_logger(__name__)


_client: Optional[GatewayClient] = None


def get_client() -> GatewayClient:
    """
    Get or create global GatewayClient instance.

    Returns:
        GatewayClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new GatewayClient instance")
        config = Config(Path.home() / '.chunkdrive' / 'config.json')
        _client = GatewayClient(config)
    return _client


def handle_list(cmd: ListCommand, client: Optional[GatewayClient] = None) -> str:
    """
    Handle 'list' command.

    Args:
        cmd: ListCommand
        client: Optional GatewayClient for dependency injection (testing)

    Returns:
        Formatted list of objects
    """
    if client is None:
        client = get_client()
    return client.list_objects()


def handle_upload(cmd: UploadCommand, client: Optional[GatewayClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with file_path and optional object_name
        client: Optional GatewayClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    logger.info(f"Executing upload command: file={cmd.file_path} name={cmd.object_name}")
    if client is None:
        client = get_client()
    return client.upload(cmd.file_path, cmd.object_name)


def handle_download(cmd: DownloadCommand, client: Optional[GatewayClient] = None) -> str:
    """
    Handle 'download' command.

    Args:
        cmd: DownloadCommand with object_name and optional output_path
        client: Optional GatewayClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    logger.info(f"Executing download command: name={cmd.object_name} output_path={cmd.output_path}")
    if client is None:
        client = get_client()
    return client.download(cmd.object_name, cmd.output_path)


def handle_delete(cmd: DeleteCommand, client: Optional[GatewayClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.delete(list(cmd.object_names))


def handle_uri(cmd: UriCommand, client: Optional[GatewayClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.uri(cmd.object_name)


def handle_stats(cmd: StatsCommand, client: Optional[GatewayClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.stats()


def handle_login(cmd: LoginCommand, client: Optional[GatewayClient] = None) -> str:
    """
    Handle 'login' command.

    Args:
        cmd: LoginCommand with username and password
        client: Optional GatewayClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    if client is None:
        client = get_client()
    return client.login(cmd.username, cmd.password)
