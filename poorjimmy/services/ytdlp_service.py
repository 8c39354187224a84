"""YouTube search through yt-dlp."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import yt_dlp

from poorjimmy.configs.schema import SearchConfig
from poorjimmy.utils.exceptions import YtDlpError
from poorjimmy.utils.formatting import watch_url

logger = logging.getLogger(__name__)

YTDL_OPTIONS = {
    "quiet": True,
    "no_warnings": True,
    "skip_download": True,
    "extract_flat": True,
    "noplaylist": True,
}


@dataclass(frozen=True)
class SearchResult:
    """One flat search entry as reported by yt-dlp."""

    id: str
    title: str
    duration: Optional[float] = None
    thumbnails: tuple = ()

    @property
    def url(self) -> str:
        return watch_url(self.id)

    @property
    def thumbnail_url(self) -> Optional[str]:
        """The last thumbnail, which yt-dlp orders as the highest quality."""
        return self.thumbnails[-1] if self.thumbnails else None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "SearchResult":
        video_id = payload["id"]
        title = payload["title"]
        if not isinstance(video_id, str) or not isinstance(title, str):
            raise ValueError("id and title must be strings")
        duration = payload.get("duration")
        if duration is not None and not isinstance(duration, (int, float)):
            raise ValueError("duration must be numeric")
        thumbnails = tuple(
            item["url"]
            for item in payload.get("thumbnails") or []
            if isinstance(item, dict) and isinstance(item.get("url"), str)
        )
        return cls(id=video_id, title=title, duration=duration, thumbnails=thumbnails)


def parse_entries(entries: Iterable[Any], limit: int) -> List[SearchResult]:
    """Convert search entries, skipping any that are malformed."""
    results: List[SearchResult] = []
    for entry in entries:
        if entry is None:
            continue
        try:
            results.append(SearchResult.from_payload(entry))
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Failed to parse search result: %s", exc)
            logger.debug("Entry that failed: %r", entry)
            continue
        if len(results) >= limit:
            break
    return results


class YtDlpService:
    """Run yt-dlp searches in a worker thread so the event loop stays free."""

    def __init__(self, config: SearchConfig):
        self.max_results = config.max_results
        self.timeout = config.timeout_seconds

    @staticmethod
    def _extract(query: str, limit: int) -> Optional[Dict[str, Any]]:
        with yt_dlp.YoutubeDL(YTDL_OPTIONS) as ydl:
            return ydl.extract_info(f"ytsearch{limit}:{query}", download=False)

    async def search(self, query: str, limit: Optional[int] = None) -> List[SearchResult]:
        """Return up to ``limit`` results for ``query``.

        Raises :class:`YtDlpError` when the extraction fails or times out.
        """
        limit = max(1, min(limit or self.max_results, self.max_results))
        logger.debug("Searching YouTube for: %s", query)
        try:
            data = await asyncio.wait_for(asyncio.to_thread(self._extract, query, limit), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise YtDlpError(f"yt-dlp timed out after {self.timeout:.0f}s") from exc
        except yt_dlp.utils.DownloadError as exc:
            raise YtDlpError(str(exc)) from exc

        entries = (data or {}).get("entries") or []
        results = parse_entries(entries, limit)
        logger.debug("Parsed %s results from query", len(results))
        return results

    async def first(self, query: str) -> Optional[SearchResult]:
        """Best single match for a free-text title."""
        results = await self.search(query, limit=1)
        return results[0] if results else None
