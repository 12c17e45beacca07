from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Union

from .models import Category, ImageRef, Product, ProductPayload, QueryState


class IProductRepository(ABC):
    @abstractmethod
    def list(self, query: QueryState) -> List[Product]:
        """Fetch the product listing matching *query*"""
        pass

    @abstractmethod
    def get_one(self, product_id: Any) -> Product:
        pass

    @abstractmethod
    def create(self, payload: ProductPayload) -> Product:
        pass

    @abstractmethod
    def update(
        self,
        product_id: Any,
        payload: Union[ProductPayload, Mapping[str, Any]],
    ) -> Product:
        """Apply a partial update; only the given fields are sent"""
        pass

    @abstractmethod
    def delete(self, product_id: Any) -> None:
        pass

    @abstractmethod
    def upload_image(self, data: bytes) -> ImageRef:
        pass


class ICategoryRepository(ABC):
    @abstractmethod
    def list_active(self) -> List[Category]:
        pass
