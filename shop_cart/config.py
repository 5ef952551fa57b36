from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CATALOG_URL = "https://fakestoreapi.com/products"


class ShopSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SHOP_", env_file=".env", extra="ignore")

    catalog_url: str = Field(default=DEFAULT_CATALOG_URL, description="Product listing endpoint")
    catalog_timeout: float = Field(default=10.0, gt=0, description="Seconds before a catalog fetch gives up")
    data_dir: Path = Field(default=Path("./shop_data"), description="Directory holding cart.json and orders.json")

    log_format: Literal["console", "json"] = "console"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
