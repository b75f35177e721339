"""HTTP client for communicating with the gateway."""

import html
import os
import re
import time
import uuid
from pathlib import Path
from typing import Optional
from urllib.parse import quote, unquote

import httpx

from cli.config import Config
from cli.constants import DOWNLOAD_PIECE_SIZE
from cli.utils import clear_progress, finish_progress, read_with_progress, show_progress
from common.formatting import format_file_size
from common.logging_config import get_logger
from gateway.utils import decode_base64_json, normalize_object_name

logger = get_logger(__name__)

_LINK_PATTERN = re.compile(r'<a href="/([^"]+)">')


class GatewayClient:
    """HTTP client for the gateway API with retry logic and error handling."""

    def __init__(self, config: Config):
        """
        Initialize gateway client.

        Args:
            config: Configuration instance
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout(),
            auth=config.get_credentials(),
        )
        self.request_id = None
        logger.info(f"Initialized GatewayClient [base_url={config.get_base_url()}]")

    def _calculate_transfer_timeout(self, size: int) -> float:
        """
        Calculate timeout for a transfer based on its size.

        Returns:
            Timeout in seconds (30s base + 0.1s per MB)
        """
        size_mb = size / (1024 * 1024)
        return 30.0 + size_mb * 0.1

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic on 5xx errors and network failures.

        Args:
            method: HTTP method (GET, DELETE, etc.)
            endpoint: API endpoint path
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If max retries exceeded or connection fails
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        self.request_id = str(uuid.uuid4())
        kwargs.setdefault('headers', {})['X-Request-ID'] = self.request_id

        last_exception = None

        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)

                logger.debug(
                    f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
                )

                if response.status_code >= 500 and attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Server error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} status={response.status_code}, retrying in {delay}s"
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): "
                        f"{method} {endpoint} error={type(e).__name__}, retrying in {delay}s"
                    )
                    time.sleep(delay)

        if isinstance(last_exception, httpx.TimeoutException):
            raise ConnectionError("Request timed out. Gateway may be overloaded.")
        raise ConnectionError("Cannot connect to gateway. Is it running?")

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map HTTP errors to user-friendly messages.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            error_data = response.json()
            code = error_data.get('code', 'UNKNOWN')
        except ValueError:
            code = 'UNKNOWN'

        error_messages = {
            'OBJECT_CONFLICT': 'Object already exists or is busy with another transfer.',
            'OBJECT_NOT_FOUND': 'Object not found on gateway.',
            'STORAGE_BACKEND_ERROR': 'Storage backend failed. Please try again later.',
            'INTERNAL_ERROR': 'Gateway error.',
        }

        if code in error_messages:
            return error_messages[code]

        status_messages = {
            401: 'Not authenticated. Please run: login <username> <password>',
            404: 'Not found',
            409: 'Conflict',
            500: 'Server error',
        }

        return status_messages.get(response.status_code, f"HTTP {response.status_code}")

    def login(self, username: str, password: str) -> str:
        """
        Save credentials and check them against the gateway.

        Returns:
            Result message
        """
        self.config.set_credentials(username, password)
        self.session.auth = (username, password)

        try:
            response = self._request_with_retry('GET', '/')
        except ConnectionError as e:
            return f"Credentials saved, but {e}"

        if response.status_code == 401:
            return "Credentials saved, but the gateway rejected them."
        return "Login successful! Credentials saved to config."

    def list_objects(self) -> str:
        """
        List stored objects with their sizes when the CDN dump is enabled,
        otherwise by name from the homepage.

        Returns:
            Formatted list of objects
        """
        try:
            response = self._request_with_retry('GET', '/cdn/')
            if response.status_code == 200:
                data = response.json()['data']
                if not data:
                    return "No objects stored."
                lines = [f"Found {len(data)} object(s):"]
                for name, entry in data.items():
                    lines.append(
                        f"  {name}  ({format_file_size(entry['size'])}, {entry['length']} chunks)"
                    )
                return '\n'.join(lines)

            if response.status_code != 404:
                return f"Error listing objects: {self._format_error(response)}"

            response = self._request_with_retry('GET', '/')
            if response.status_code != 200:
                return f"Error listing objects: {self._format_error(response)}"

            names = [html.unescape(unquote(link)) for link in _LINK_PATTERN.findall(response.text)]
            if not names:
                return "No objects stored."
            return '\n'.join([f"Found {len(names)} object(s):"] + [f"  {name}" for name in names])

        except ConnectionError as e:
            return f"Error: {e}"

    def upload(self, file_path: str, object_name: Optional[str] = None) -> str:
        """
        Upload a local file as the raw request body.

        Args:
            file_path: Path of the file to upload
            object_name: Object name (defaults to the file's base name)

        Returns:
            Result message
        """
        if not os.path.isfile(file_path):
            return f"Error: File not found: {file_path}"

        file_size = os.path.getsize(file_path)
        name = object_name or os.path.basename(file_path)
        timeout = self._calculate_transfer_timeout(file_size)

        try:
            response = self.session.post(
                f"/{quote(name)}",
                content=read_with_progress(file_path, file_size, name),
                headers={'Content-Length': str(file_size)},
                timeout=timeout,
            )
        except httpx.ConnectError:
            clear_progress()
            return f"Error uploading {file_path}: Cannot connect to gateway"
        except httpx.TimeoutException:
            clear_progress()
            return f"Error uploading {file_path}: Upload timed out (size: {format_file_size(file_size)}, timeout: {timeout:.1f}s)"

        if response.status_code == 303:
            return f"Uploaded: {normalize_object_name(name)} ({format_file_size(file_size)})"
        return f"Error uploading {file_path}: {self._format_error(response)}"

    def download(self, object_name: str, output_path: Optional[str] = None) -> str:
        """
        Stream an object to a local file.

        Args:
            object_name: Object to download
            output_path: Destination path (defaults to ./<object_name>)

        Returns:
            Result message
        """
        output_file = Path(output_path) if output_path else Path.cwd() / object_name
        if output_file.is_dir():
            output_file = output_file / object_name
        output_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            with self.session.stream('GET', f"/{quote(object_name)}") as response:
                if response.status_code != 200:
                    response.read()
                    return f"Error downloading {object_name}: {self._format_error(response)}"

                total = int(response.headers.get('Content-Length', 0))
                received = 0
                with open(output_file, 'wb') as f:
                    for piece in response.iter_bytes(chunk_size=DOWNLOAD_PIECE_SIZE):
                        f.write(piece)
                        received += len(piece)
                        show_progress("Downloading", object_name, received, total)
                finish_progress()

        except httpx.ConnectError:
            return f"Error downloading {object_name}: Cannot connect to gateway"
        except (httpx.TimeoutException, httpx.RemoteProtocolError) as e:
            clear_progress()
            output_file.unlink(missing_ok=True)
            return f"Error downloading {object_name}: transfer interrupted ({type(e).__name__})"

        return f"Downloaded: {object_name} -> {output_file} ({format_file_size(received)})"

    def delete(self, object_names: list[str]) -> str:
        """
        Delete objects one by one.

        Returns:
            One result line per object
        """
        results = []
        for name in object_names:
            try:
                response = self._request_with_retry('DELETE', f"/{quote(name)}", max_retries=0)
            except ConnectionError as e:
                results.append(f"Error deleting {name}: {e}")
                continue

            if response.status_code == 200:
                results.append(f"Deleted: {name}")
            else:
                results.append(f"Error deleting {name}: {self._format_error(response)}")
        return '\n'.join(results)

    def uri(self, object_name: str) -> str:
        """
        Fetch and decode the base64 URI payload of an object.

        Returns:
            Object name and its chunk refs, one per line
        """
        try:
            response = self._request_with_retry('GET', f"/uri/{quote(object_name)}")
        except ConnectionError as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        payload = decode_base64_json(response.text)
        lines = [f"{payload['fileName']} ({len(payload['files'])} chunks):"]
        lines.extend(f"  {ref}" for ref in payload['files'])
        return '\n'.join(lines)

    def stats(self) -> str:
        """
        Show aggregate totals from the CDN dump.

        Returns:
            Totals message
        """
        try:
            response = self._request_with_retry('GET', '/cdn/')
        except ConnectionError as e:
            return f"Error: {e}"

        if response.status_code == 404:
            return "Stats unavailable: CDN dump is disabled on the gateway."
        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        data = response.json()
        meta = data['meta']
        return (
            f"Objects: {len(data['data'])}\n"
            f"Total size: {format_file_size(meta['size'])}\n"
            f"Total chunks: {meta['length']}"
        )

    def close(self) -> None:
        """Close HTTP session."""
        self.session.close()
