"""Product aggregate.

A product is listed once, sold at most once and never deleted.  There is
no resale: once ``sold`` is true the owner is frozen.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from market.domain.exceptions import AlreadySoldError, EmptyNameError, ZeroPriceError
from market.domain.model.value_objects import Identity, Value, to_units


@dataclass
class Product:
    """A listing in the marketplace.

    Invariants:
    - ``id`` and ``price`` never change after creation
    - ``price`` is strictly positive
    - ``sold`` goes from False to True exactly once

    Use ``Product.create()`` for new listings.  The ``__init__`` is kept
    simple so the registry can rebuild records without re-validating.
    """

    id: int
    name: str
    price: Value
    owner: Identity
    sold: bool = False

    # --- Factory (used for NEW listings only) ---------------------------------

    @staticmethod
    def create(
        product_id: int,
        name: str,
        price: str | int | Value,
        owner: Identity,
    ) -> Product:
        """Create a new unsold listing owned by its creator."""
        if not name or not name.strip():
            raise EmptyNameError("Product name is required")

        units = to_units(price)
        if units <= 0:
            raise ZeroPriceError(f"Product price must be greater than zero, got {units}")

        return Product(id=product_id, name=name.strip(), price=Value(units), owner=owner)

    # --- State transitions ----------------------------------------------------

    def sell_to(self, buyer: Identity) -> None:
        """Transfer ownership to *buyer* and mark the product sold."""
        if self.sold:
            raise AlreadySoldError(f"Product #{self.id} is already sold")
        self.owner = buyer
        self.sold = True

    def copy(self) -> Product:
        return replace(self)
