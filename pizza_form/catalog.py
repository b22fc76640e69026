"""Topping catalog: the fixed list of add-ons a customer can select.

The catalog is injected into the store and the controller so tests (and other
storefronts) can supply their own list::

    catalog = ToppingCatalog([Topping(id="a", label="Anchovies")])
    store = FormStore(catalog)
"""

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict


class Topping(BaseModel):
    """A selectable topping. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str


class ToppingCatalog:
    """Read-only, ordered collection of toppings keyed by id."""

    def __init__(self, toppings: Iterable[Topping]) -> None:
        self._toppings: tuple[Topping, ...] = tuple(toppings)
        self._by_id: dict[str, Topping] = {}
        for topping in self._toppings:
            if topping.id in self._by_id:
                raise ValueError(f"Duplicate topping id in catalog: {topping.id!r}")
            self._by_id[topping.id] = topping

    def __iter__(self) -> Iterator[Topping]:
        return iter(self._toppings)

    def __len__(self) -> int:
        return len(self._toppings)

    def __contains__(self, topping_id: object) -> bool:
        return topping_id in self._by_id

    def get(self, topping_id: str) -> Topping | None:
        return self._by_id.get(topping_id)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._by_id)

    def labels_for(self, topping_ids: Iterable[str]) -> list[str]:
        """Labels of the given ids, in catalog order. Unknown ids are skipped."""
        wanted = set(topping_ids)
        return [t.label for t in self._toppings if t.id in wanted]


DEFAULT_TOPPINGS: tuple[Topping, ...] = (
    Topping(id="1", label="Pepperoni"),
    Topping(id="2", label="Green Peppers"),
    Topping(id="3", label="Pineapple"),
    Topping(id="4", label="Mushrooms"),
    Topping(id="5", label="Ham"),
)


def default_catalog() -> ToppingCatalog:
    return ToppingCatalog(DEFAULT_TOPPINGS)
