"""Pydantic model for the outcome of a consent-banner acceptance attempt."""

from __future__ import annotations

from typing import Literal

import pydantic

ConsentStatus = Literal["clicked", "not_found"]


class ConsentOutcome(pydantic.BaseModel):
    """Result of trying to click a cookie-consent "accept" control."""

    model_config = pydantic.ConfigDict(frozen=True)

    status: ConsentStatus
    selector: str | None = None

    @property
    def clicked(self) -> bool:
        return self.status == "clicked"

    @classmethod
    def clicked_on(cls, selector: str) -> ConsentOutcome:
        """Return a *clicked* outcome for *selector*."""
        return cls(status="clicked", selector=selector)

    @classmethod
    def not_found(cls) -> ConsentOutcome:
        """Return the default *not-found* outcome."""
        return cls(status="not_found")
