from .bootstrap import bootstrap, build_catalog_coordinator, create_container
from .container import Container, Lifetime

__all__ = ["Container", "Lifetime", "bootstrap", "build_catalog_coordinator", "create_container"]
