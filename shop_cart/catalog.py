from __future__ import annotations

from decimal import Decimal
from typing import List

import httpx
import structlog
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from shop_cart.config import ShopSettings
from shop_cart.models import Product

logger = structlog.get_logger(__name__)


class CatalogFetchError(Exception):
    pass


class ProductPayload(BaseModel):
    """One record of the catalog response. Unknown fields are dropped."""

    model_config = ConfigDict(extra="ignore")

    id: StrictInt
    title: StrictStr
    price: Decimal = Field(ge=0)
    image: HttpUrl

    @field_validator("price", mode="before")
    @classmethod
    def price_from_float_text(cls, value):
        # 22.3 must become Decimal("22.3"), not the binary float expansion
        if isinstance(value, (bool, str)):
            raise ValueError("price must be a JSON number")
        if isinstance(value, float):
            return str(value)
        return value

    def to_product(self) -> Product:
        return Product(id=self.id, title=self.title, price=self.price, image=str(self.image))


_PAYLOAD_LIST = TypeAdapter(List[ProductPayload])


class CatalogClient:
    def __init__(self, url: str, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: ShopSettings) -> CatalogClient:
        return cls(settings.catalog_url, timeout=settings.catalog_timeout)

    def fetch_products(self) -> List[Product]:
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.get(self.url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            logger.warning("catalog fetch failed", url=self.url, error=str(e))
            raise CatalogFetchError(f"Error fetching products from {self.url}: {e}") from e

        if not response.is_success:
            logger.warning("catalog fetch failed", url=self.url, status=response.status_code)
            raise CatalogFetchError(f"Catalog responded with HTTP {response.status_code}")

        try:
            payloads = _PAYLOAD_LIST.validate_json(response.content)
        except ValidationError as e:
            logger.warning("catalog response rejected", url=self.url, errors=e.error_count())
            raise CatalogFetchError(f"Malformed catalog response: {e}") from e

        products = [payload.to_product() for payload in payloads]
        logger.info("catalog fetched", url=self.url, count=len(products))
        return products
