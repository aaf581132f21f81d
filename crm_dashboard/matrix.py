from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping

from .schemas.links import BankRef, LinkRecord, ProductRef


@dataclass(frozen=True)
class LinkMatrix:
    """
    Bank x product grid derived from a flat list of link records.
    Rows and columns keep the order in which each id first appeared.
    """

    rows: tuple[BankRef, ...] = ()
    columns: tuple[ProductRef, ...] = ()
    _lookup: Mapping[tuple[int, int], LinkRecord] = field(default_factory=lambda: MappingProxyType({}), repr=False)

    def cell(self, bank_id: int, product_id: int) -> LinkRecord | None:
        return self._lookup.get((bank_id, product_id))

    def cells(self) -> Iterator[tuple[BankRef, ProductRef, LinkRecord]]:
        """Present cells in row-major order."""
        for bank in self.rows:
            for product in self.columns:
                link = self._lookup.get((bank.id, product.id))
                if link is not None:
                    yield bank, product, link

    def as_grid(self) -> list[list[LinkRecord | None]]:
        return [[self._lookup.get((bank.id, product.id)) for product in self.columns] for bank in self.rows]

    def __len__(self) -> int:
        return len(self._lookup)


def _as_record(item: LinkRecord | Mapping[str, Any]) -> LinkRecord:
    if isinstance(item, LinkRecord):
        return item
    return LinkRecord.model_validate(item)


def build_matrix(links: Iterable[LinkRecord | Mapping[str, Any]]) -> LinkMatrix:
    """
    Pivot link records into a LinkMatrix.

    The first record seen for a bank (or product) id decides its display name.
    When several records share a (bank, product) pair the last one is kept.
    """
    banks: dict[int, BankRef] = {}
    products: dict[int, ProductRef] = {}
    lookup: dict[tuple[int, int], LinkRecord] = {}

    for item in links:
        link = _as_record(item)
        if link.bank not in banks:
            banks[link.bank] = BankRef(id=link.bank, name=link.bank_name)
        if link.product not in products:
            products[link.product] = ProductRef(id=link.product, name=link.product_name)
        lookup[(link.bank, link.product)] = link

    return LinkMatrix(
        rows=tuple(banks.values()),
        columns=tuple(products.values()),
        _lookup=MappingProxyType(lookup),
    )
