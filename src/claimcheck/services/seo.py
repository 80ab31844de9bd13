"""SEO/summary generator client and fire-and-forget regeneration.

The generator is an external HTTP service that produces an SEO title and
description for a claim from its title, category and leading side. Calls are
never awaited by request handlers: :class:`SeoRegenerator` schedules them as
background tasks on the running event loop and writes results back with its
own database session. Every failure is logged and dropped.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

import httpx
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from claimcheck.core.errors import DependencyDisabledError, DependencyError
from claimcheck.core.settings import settings
from claimcheck.models import Claim
from claimcheck.models.claim import SEO_DESCRIPTION_MAX_LENGTH, SEO_TITLE_MAX_LENGTH

# Configure logger for this module
logger = logging.getLogger(__name__)

HTTP_UNAVAILABLE_FOR_LEGAL_REASONS = 451
REGION_RESTRICTED_CODE = "unsupported_country_region_territory"
MAX_TRACKED_CLAIMS = 10_000

# Generator inputs: title, category name and leading side.
SeoKey = tuple[str, str | None, str | None]


class RegionRestrictedError(DependencyError):
    """The generator refused the request for the caller's region."""


@dataclass(frozen=True)
class SeoConfig:
    """Immutable configuration for the SEO generator client."""

    base_url: str | None
    api_key: str | None
    timeout_seconds: float

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)


@dataclass(frozen=True)
class SeoResult:
    """Generated metadata, already clipped to column limits."""

    seo_title: str
    seo_description: str


def load_seo_config() -> SeoConfig:
    """Build the client configuration from application settings."""
    return SeoConfig(
        base_url=settings.seo_service_url,
        api_key=settings.seo_service_api_key,
        timeout_seconds=settings.seo_service_timeout_seconds,
    )


class SeoClient:
    """Async HTTP client for the SEO/summary generator."""

    def __init__(self, config: SeoConfig | None = None) -> None:
        self.config = config or load_seo_config()
        self._client: httpx.AsyncClient | None = None

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.config.enabled:
            raise DependencyDisabledError("SEO generator is not configured")
        if self._client is None:
            headers = {}
            if self.config.api_key:
                headers["Authorization"] = f"Bearer {self.config.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url or "",
                timeout=self.config.timeout_seconds,
                headers=headers,
            )
        return self._client

    async def generate(
        self,
        title: str,
        category: str | None,
        leading_side: str | None,
    ) -> SeoResult:
        """Request SEO metadata for a claim.

        Raises:
            DependencyDisabledError: If no generator URL is configured.
            RegionRestrictedError: If the generator is unavailable in this region.
            DependencyError: On transport failures or malformed responses.
        """
        client = await self._ensure_client()
        try:
            response = await client.post(
                "/generate",
                json={"title": title, "category": category, "leading_side": leading_side},
            )
        except httpx.HTTPError as exc:
            raise DependencyError(f"SEO generator request failed: {exc}") from exc

        if response.status_code == HTTP_UNAVAILABLE_FOR_LEGAL_REASONS:
            raise RegionRestrictedError("SEO generator is not available in this region")
        if response.is_error:
            code = _error_code(response)
            if code == REGION_RESTRICTED_CODE:
                raise RegionRestrictedError("SEO generator is not available in this region")
            raise DependencyError(
                f"SEO generator returned HTTP {response.status_code}"
            )

        try:
            payload = response.json()
            seo_title = str(payload["seo_title"]).strip()
            seo_description = str(payload["seo_description"]).strip()
        except (ValueError, KeyError, TypeError) as exc:
            raise DependencyError("SEO generator returned a malformed payload") from exc

        return SeoResult(
            seo_title=seo_title[:SEO_TITLE_MAX_LENGTH],
            seo_description=seo_description[:SEO_DESCRIPTION_MAX_LENGTH],
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _error_code(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        return error.get("code")
    return body.get("code")


class SeoRegenerator:
    """Schedules SEO regeneration and writes results back opportunistically.

    Regeneration only runs when the inputs the generator sees (title,
    category and leading side) differ from the last ones scheduled for that
    claim, so recomputes on read do not call the generator again.
    """

    def __init__(
        self,
        client: SeoClient | None = None,
        session_factory: Callable[[], Session] | None = None,
        max_tracked_claims: int = MAX_TRACKED_CLAIMS,
    ) -> None:
        self.client = client or SeoClient()
        self._session_factory = session_factory
        self._tasks: set[asyncio.Task[bool]] = set()
        self._last_keys: OrderedDict[int, SeoKey] = OrderedDict()
        self._max_tracked_claims = max_tracked_claims

    def _new_session(self) -> Session:
        if self._session_factory is not None:
            return self._session_factory()
        from claimcheck.db.session import SessionLocal

        return SessionLocal()

    def _remember(self, claim_id: int, key: SeoKey) -> None:
        self._last_keys[claim_id] = key
        self._last_keys.move_to_end(claim_id)
        while len(self._last_keys) > self._max_tracked_claims:
            self._last_keys.popitem(last=False)

    def _forget(self, claim_id: int, key: SeoKey) -> None:
        # A newer schedule may already have replaced the key.
        if self._last_keys.get(claim_id) == key:
            del self._last_keys[claim_id]

    def schedule(
        self,
        claim_id: int,
        title: str,
        category: str | None,
        leading_side: str | None,
    ) -> asyncio.Task[bool] | None:
        """Start regeneration in the background and return immediately.

        Returns None when the generator is disabled, no event loop is running,
        or the same inputs were already scheduled for this claim.
        """
        if not self.client.enabled:
            return None
        key: SeoKey = (title, category, leading_side)
        if self._last_keys.get(claim_id) == key:
            logger.debug("SEO inputs unchanged for claim %s; not regenerating", claim_id)
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; skipping SEO regeneration for claim %s", claim_id)
            return None

        self._remember(claim_id, key)
        task = loop.create_task(self.regenerate(claim_id, title, category, leading_side))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def regenerate(
        self,
        claim_id: int,
        title: str,
        category: str | None,
        leading_side: str | None,
    ) -> bool:
        """Generate and persist SEO metadata. Returns True when written."""
        key: SeoKey = (title, category, leading_side)
        try:
            result = await self.client.generate(title, category, leading_side)
        except DependencyDisabledError:
            return False
        except RegionRestrictedError as exc:
            logger.warning("SEO regeneration skipped for claim %s: %s", claim_id, exc)
            return False
        except DependencyError as exc:
            logger.warning("SEO regeneration failed for claim %s: %s", claim_id, exc)
            self._forget(claim_id, key)
            return False

        written = await asyncio.to_thread(self._store, claim_id, result)
        if not written:
            self._forget(claim_id, key)
        return written

    def _store(self, claim_id: int, result: SeoResult) -> bool:
        """Write generated metadata with a dedicated session."""
        db = self._new_session()
        try:
            db.execute(
                update(Claim)
                .where(Claim.id == claim_id)
                .values(seo_title=result.seo_title, seo_description=result.seo_description)
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("Failed to store SEO metadata for claim %s: %s", claim_id, exc)
            return False
        finally:
            db.close()
        return True

    async def drain(self) -> None:
        """Wait for in-flight regenerations; used on shutdown."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


class _SeoRegeneratorSingleton:
    _instance: SeoRegenerator | None = None

    @classmethod
    def get_instance(cls) -> SeoRegenerator:
        if cls._instance is None:
            cls._instance = SeoRegenerator()
        return cls._instance


def get_seo_regenerator() -> SeoRegenerator:
    """Return the process-wide regenerator."""
    return _SeoRegeneratorSingleton.get_instance()
