"""Business-model catalog: built-in profiles loaded from business_models.json."""
from venturesim.catalog.loader import Catalog, load_catalog, DEFAULT_CATALOG_PATH

__all__ = ["Catalog", "load_catalog", "DEFAULT_CATALOG_PATH"]
