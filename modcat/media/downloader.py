"""
Handles the low-level streaming of a single file over HTTP to disk.
"""

import logging
from pathlib import Path

import aiofiles
import aiohttp

from modcat.cli.progress_manager import ProgressManager
from modcat.models.config import DEFAULT_USER_AGENT

log = logging.getLogger(__name__)


class Downloader:
    """
    Streams one URL to one file.

    Single attempt: transport and filesystem errors propagate unchanged, and
    a failed download may leave a partial file behind.
    """

    DEFAULT_CHUNK_SIZE = 131072  # 128 KB

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout_seconds: float = 0,
        session: aiohttp.ClientSession | None = None,
    ):
        self.chunk_size = chunk_size
        self.user_agent = user_agent
        self.timeout_seconds = timeout_seconds
        self._session = session
        self._owns_session = session is None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.user_agent},
                timeout=aiohttp.ClientTimeout(
                    total=self.timeout_seconds or None, sock_connect=15
                ),
            )
            self._owns_session = True
            log.debug("Created download session.")
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            log.debug("Download session closed.")

    async def stream(
        self,
        url: str,
        destination_path: Path,
        expected_length: int | None = None,
        progress_manager: ProgressManager | None = None,
    ) -> int:
        """
        Streams the response body of `url` into `destination_path`.

        The file is opened for truncating write; the parent directory must
        already exist. Returns the number of bytes written.
        """
        session = await self._get_session()
        task_id = None

        async with session.get(url, allow_redirects=True) as response:
            response.raise_for_status()

            total = expected_length
            content_length = response.headers.get("Content-Length", "").strip()
            if total is None and content_length.isdigit():
                total = int(content_length)

            if progress_manager:
                task_id = progress_manager.add_file(destination_path.name, total)

            bytes_written = 0
            async with aiofiles.open(destination_path, "wb") as f:
                async for chunk in response.content.iter_chunked(self.chunk_size):
                    await f.write(chunk)
                    bytes_written += len(chunk)
                    if progress_manager and task_id is not None:
                        progress_manager.update_task_progress(
                            task_id, completed=bytes_written
                        )

        if progress_manager and task_id is not None:
            progress_manager.finish_file(task_id, bytes_written)

        if expected_length is not None and bytes_written != expected_length:
            log.warning(
                f"[yellow]'{destination_path.name}' is {bytes_written} bytes, "
                f"catalog listed {expected_length}.[/yellow]"
            )
        log.debug(f"Wrote {bytes_written} bytes to '{destination_path}'.")
        return bytes_written
