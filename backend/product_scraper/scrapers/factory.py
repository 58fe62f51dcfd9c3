"""Factory selecting the extraction strategy and fetch policy for a URL."""

from dataclasses import dataclass
from typing import Dict, Optional, Union
from urllib.parse import urlparse

import structlog

from product_scraper.config import Settings
from product_scraper.core.exceptions import ConfigurationError
from product_scraper.scrapers.base import ExtractionFailure, ExtractionStrategy, FailureKind
from product_scraper.scrapers.fetcher import FetchOptions, WaitCondition
from product_scraper.scrapers.site_profiles import SiteProfile, load_site_profiles, normalize_host
from product_scraper.scrapers.strategies import AIAssistedStrategy, SelectorStrategy
from product_scraper.scrapers.utils.generator import GeminiGenerator, TextGenerator


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResolvedSite:
    """Strategy and fetch policy chosen for one URL."""

    strategy: ExtractionStrategy
    fetch_options: FetchOptions
    host: str


class StrategyFactory:
    """Maps target sites to extraction strategies.

    Sites listed in the profile table get their configured strategy and
    fetch overrides. Any other site falls back to AI-assisted extraction
    when a text generator is available.
    """

    def __init__(
        self,
        profiles: Dict[str, SiteProfile],
        default_fetch_options: FetchOptions,
        generator: Optional[TextGenerator] = None,
        ai_fallback: bool = False,
        currency: str = "XOF",
        currency_token: Optional[str] = "FCFA",
        max_prompt_html_chars: int = 200_000,
    ):
        needs_generator = ai_fallback or any(p.strategy == "ai" for p in profiles.values())
        if needs_generator and generator is None:
            raise ConfigurationError(
                "GEMINI_API_KEY",
                "AI-assisted extraction is configured but no text generator is available",
            )

        self.profiles = profiles
        self.default_fetch_options = default_fetch_options
        self.generator = generator
        self.ai_fallback = ai_fallback
        self.currency = currency.strip().upper()
        self.currency_token = currency_token
        self.max_prompt_html_chars = max_prompt_html_chars

    def find_profile(self, host: str) -> Optional[SiteProfile]:
        """Find the profile for a host, walking up to parent domains."""
        labels = normalize_host(host).split(".")
        for i in range(len(labels)):
            profile = self.profiles.get(".".join(labels[i:]))
            if profile:
                return profile
        return None

    def fetch_options_for(self, url: str) -> FetchOptions:
        """Fetch options for a URL, used when only HTML is requested."""
        profile = self.find_profile(urlparse(url).hostname or "")
        if profile is None:
            return self.default_fetch_options
        return self._fetch_options(profile)

    def resolve(self, url: str) -> Union[ResolvedSite, ExtractionFailure]:
        """Choose the strategy and fetch options for a URL.

        Returns:
            ResolvedSite, or a ConfigurationFault failure when no strategy
            applies. The failure is returned before anything is fetched.
        """
        host = normalize_host(urlparse(url).hostname or "")
        profile = self.find_profile(host)

        if profile is None:
            if not self.ai_fallback:
                logger.warning("no_strategy_for_host", host=host)
                return ExtractionFailure(
                    FailureKind.CONFIGURATION_FAULT,
                    f"no selector profile for {host} and AI fallback is disabled",
                )
            logger.info("strategy_resolved", host=host, strategy="ai", source="fallback")
            return ResolvedSite(self._ai_strategy(), self.default_fetch_options, host)

        logger.info("strategy_resolved", host=host, strategy=profile.strategy, source="profile")
        return ResolvedSite(self._profile_strategy(profile), self._fetch_options(profile), host)

    def _profile_strategy(self, profile: SiteProfile) -> ExtractionStrategy:
        currency = profile.currency or self.currency
        currency_token = profile.currency_token or self.currency_token
        if profile.strategy == "ai":
            return self._ai_strategy(currency, currency_token)
        return SelectorStrategy(profile.selectors, currency=currency, currency_token=currency_token)

    def _ai_strategy(
        self,
        currency: Optional[str] = None,
        currency_token: Optional[str] = None,
    ) -> AIAssistedStrategy:
        return AIAssistedStrategy(
            self.generator,
            currency=currency or self.currency,
            currency_token=currency_token or self.currency_token,
            max_html_chars=self.max_prompt_html_chars,
        )

    def _fetch_options(self, profile: SiteProfile) -> FetchOptions:
        fetch = profile.fetch
        return self.default_fetch_options.with_overrides(
            wait_until=fetch.wait_until,
            timeout_ms=fetch.resolved_timeout_ms(),
            wait_for_selector=fetch.wait_for_selector,
            selector_timeout_ms=fetch.selector_timeout_ms,
            block_resources=fetch.block_resources,
            body_only=fetch.body_only,
        )


def default_fetch_options(settings: Settings) -> FetchOptions:
    """Fetch options from the deployment-wide settings."""
    return FetchOptions(
        wait_until=WaitCondition(settings.WAIT_UNTIL),
        timeout_ms=settings.NAVIGATION_TIMEOUT_MS,
        selector_timeout_ms=settings.SELECTOR_TIMEOUT_MS,
        block_resources=settings.BLOCK_RESOURCES,
        min_content_length=settings.MIN_CONTENT_LENGTH,
    )


def build_strategy_factory(settings: Settings) -> StrategyFactory:
    """Build the factory at startup.

    Raises:
        ConfigurationError: If the profile table is invalid or AI extraction
            is required without a Gemini API key
    """
    profiles = load_site_profiles(settings.SITE_PROFILES_PATH)

    generator = None
    if settings.AI_FALLBACK_ENABLED or any(p.strategy == "ai" for p in profiles.values()):
        generator = GeminiGenerator(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            timeout_seconds=settings.GENERATION_TIMEOUT_SECONDS,
            base_url=settings.GEMINI_BASE_URL or None,
        )

    factory = StrategyFactory(
        profiles=profiles,
        default_fetch_options=default_fetch_options(settings),
        generator=generator,
        ai_fallback=settings.AI_FALLBACK_ENABLED,
        currency=settings.DEFAULT_CURRENCY,
        currency_token=settings.DEFAULT_CURRENCY_TOKEN,
        max_prompt_html_chars=settings.MAX_PROMPT_HTML_CHARS,
    )
    logger.info(
        "strategy_factory_built",
        site_profiles=len(profiles),
        ai_fallback=settings.AI_FALLBACK_ENABLED,
    )
    return factory
