"""Application services: catalog queries."""

from __future__ import annotations

from collections.abc import Callable

from marketplace.application.dto import Pagination, ProductDTO, ProductQuery, product_to_dto
from marketplace.application.specifications import (
    product_catalog,
    product_filter,
    product_with_details,
)
from marketplace.domain.exceptions import EntityNotFoundError
from marketplace.domain.model.product import Product, ProductBrand, ProductType
from marketplace.domain.repository.unit_of_work import UnitOfWork
from marketplace.domain.specification import Specification


class BrowseProductsHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, query: ProductQuery) -> Pagination[ProductDTO]:
        """Return one page of the filtered, sorted catalog.

        ``count`` is the number of matches across all pages.
        """
        spec = product_catalog(query)
        with self._uow_factory() as uow:
            products = uow.repository(Product)
            total = products.count_by_spec(product_filter(query))
            page = products.list_by_spec(spec)

        return Pagination(
            page_index=query.page_index,
            page_size=spec.page.size,  # type: ignore[union-attr]
            count=total,
            data=[product_to_dto(p) for p in page],
        )


class ShowProductHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self, product_id: int) -> ProductDTO:
        with self._uow_factory() as uow:
            product = uow.repository(Product).first_by_spec(product_with_details(product_id))
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        return product_to_dto(product)


class ListBrandsHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self) -> list[ProductBrand]:
        with self._uow_factory() as uow:
            return uow.repository(ProductBrand).list_by_spec(
                Specification().ordered_by(lambda b: b.name)
            )


class ListTypesHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    def handle(self) -> list[ProductType]:
        with self._uow_factory() as uow:
            return uow.repository(ProductType).list_by_spec(
                Specification().ordered_by(lambda t: t.name)
            )
