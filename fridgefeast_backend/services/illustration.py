"""Optional dish illustrations and the per-card lazy fetch latch."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Protocol, Sequence

from fridgefeast_backend.config import PLACEHOLDER_IMAGE_URL

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Illustration:
    """Outcome of an illustration request."""

    status: Literal["ok", "disabled"]
    image_url: Optional[str]


class Illustrator(Protocol):
    def illustrate(self, name: str, ingredients: Sequence[str]) -> Illustration: ...


class PlaceholderIllustrator:
    """Illustrator without an image provider.

    While generation is disabled every dish gets the stock placeholder photo;
    once enabled there is no provider to call yet, so no image is returned.
    """

    def __init__(self, *, enabled: bool = False) -> None:
        self._enabled = enabled

    def illustrate(self, name: str, ingredients: Sequence[str]) -> Illustration:
        if not self._enabled:
            return Illustration(status="disabled", image_url=PLACEHOLDER_IMAGE_URL)
        # TODO: call an image generation provider with the name and ingredients.
        return Illustration(status="ok", image_url=None)


class LatchState(enum.Enum):
    UNREQUESTED = "unrequested"
    IN_FLIGHT = "in_flight"
    RESOLVED = "resolved"
    FAILED = "failed"


class RecipeImageLatch:
    """One-shot image fetch for a single recipe card.

    The transition out of ``UNREQUESTED`` happens at most once; later calls
    to :meth:`request` return whatever the first fetch produced. A failed or
    empty fetch leaves the card on its placeholder.
    """

    def __init__(self) -> None:
        self.state = LatchState.UNREQUESTED
        self.image_url: Optional[str] = None

    def request(self, fetch: Callable[[], Optional[str]]) -> Optional[str]:
        if self.state is not LatchState.UNREQUESTED:
            return self.image_url

        self.state = LatchState.IN_FLIGHT
        try:
            image_url = fetch()
        except Exception:  # noqa: BLE001 - cosmetic, placeholder stays visible
            logger.warning("recipe image fetch failed", exc_info=True)
            self.state = LatchState.FAILED
            return None

        self.image_url = image_url
        self.state = LatchState.RESOLVED
        return image_url
