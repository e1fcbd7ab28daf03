"""Client for the file-content index that serves whole files by path."""
from __future__ import annotations

import httpx


class FileIndexClient:
    def __init__(self, base_url: str, timeout: float = 30.0) -> None:
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout

    async def get_file(self, repo_ref: str, relative_path: str) -> str:
        """Return the full raw content of ``relative_path`` in ``repo_ref``."""

        params = {"repo_ref": repo_ref, "path": relative_path}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(f"{self.base_url}/api/v1/files", params=params)
            if response.status_code == 404:
                raise RuntimeError(f"file not found in index: {repo_ref}/{relative_path}")
            response.raise_for_status()
            data = response.json()

        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, str):
            raise RuntimeError("file index returned malformed payload")
        return content
