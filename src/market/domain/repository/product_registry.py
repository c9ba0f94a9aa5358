"""Abstract registry for the Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  The registry owns the id sequence: ids start at 1,
are handed out once per successful creation and are never reused.
Id 0 is reserved as the "no product" sentinel.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from market.domain.model.product import Product
from market.domain.model.value_objects import Identity, Value


class ProductRegistry(ABC):

    @property
    @abstractmethod
    def sequence(self) -> int:
        """Return the last id handed out (0 when nothing is listed)."""

    @abstractmethod
    def create(
        self,
        name: str,
        price: str | int | Value,
        creator: Identity,
        on_commit: Callable[[Product], None] | None = None,
    ) -> Product:
        """Validate and store a new listing, returning a copy of it.

        *on_commit* runs with the stored copy before any other write can
        be committed, so anything it records follows commit order.
        """

    @abstractmethod
    def get(self, product_id: int) -> Product | None:
        """Return a copy of the product, or None if the id was never assigned."""

    @abstractmethod
    def update(self, product_id: int, new_owner: Identity, sold: bool) -> None:
        """Overwrite ownership state.  Reserved for the purchase engine."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return copies of every product, in id order."""
