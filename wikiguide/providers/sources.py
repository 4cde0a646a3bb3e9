"""
Ordered content sources and the resolver loop that walks them.

The chain for a preferred language is data, not control flow: travel wiki in
the preferred language, travel wiki in the fallback language, then the
general encyclopedia. Reordering or adding a source means editing
build_source_chain only.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

from wikiguide.config import Config, get_config
from wikiguide.models import SourceKind, WikiSource
from wikiguide.providers.base import ProviderError

T = TypeVar('T')

logger = logging.getLogger(__name__)


def travel_wiki(language: str, config: Optional[Config] = None) -> WikiSource:
    config = config or get_config()
    domain = config.source_config.travel_wiki_domain.format(lang=language)
    return WikiSource(kind=SourceKind.TRAVEL_WIKI, language=language, domain=domain)


def encyclopedia(language: str, config: Optional[Config] = None) -> WikiSource:
    config = config or get_config()
    domain = config.source_config.encyclopedia_domain.format(lang=language)
    return WikiSource(kind=SourceKind.ENCYCLOPEDIA, language=language, domain=domain)


def build_source_chain(language: Optional[str], config: Optional[Config] = None) -> List[WikiSource]:
    """Return the candidate sources for ``language`` in priority order."""
    config = config or get_config()
    languages = config.language_config
    preferred = (language or languages.default).strip().lower()

    chain = [travel_wiki(preferred, config)]
    if languages.fallback and languages.fallback != preferred:
        chain.append(travel_wiki(languages.fallback, config))
    chain.append(encyclopedia(languages.encyclopedia or preferred, config))
    return chain


@dataclass(frozen=True)
class Resolved(Generic[T]):
    """A value together with the source that actually produced it."""
    value: T
    source: WikiSource


class SourceResolver:
    """Try sources in order and short-circuit on the first usable answer."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()

    def chain(self, language: Optional[str]) -> List[WikiSource]:
        return build_source_chain(language, self.config)

    async def resolve(
        self,
        language: Optional[str],
        probe: Callable[[WikiSource], Awaitable[Optional[T]]],
    ) -> Optional[Resolved[T]]:
        """Run ``probe`` against each source until one returns a usable value.

        A ProviderError or an empty value means "try the next source". Only
        exhausting the whole chain yields None.
        """
        for source in self.chain(language):
            try:
                value = await probe(source)
            except ProviderError as e:
                logger.info(f"Source {source.domain} unavailable, trying next: {e}")
                continue
            if value:
                return Resolved(value=value, source=source)
            logger.info(f"Source {source.domain} had no usable content, trying next")
        return None
