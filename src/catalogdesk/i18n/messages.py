"""User-facing message lookup.

The catalog components never format notification text themselves; they ask a
:class:`MessageCatalog` for a key and get back the string for the active
language, the caller's default, or the key itself as a last resort.
"""

from __future__ import annotations

from typing import Mapping, Optional

from ..config import DEFAULT_LANGUAGE

BUILTIN_MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "products.errorLoad": "Could not load products",
        "products.errorSave": "Could not save the product",
        "products.errorDelete": "Could not delete the product",
        "products.errorToggle": "Could not change the product status",
        "products.errorUpload": "Could not upload the image",
        "products.createSuccess": "Product created",
        "products.updateSuccess": "Product updated",
        "products.deleteSuccess": "Product deleted",
        "products.toggleSuccess": "Product status updated",
        "products.deleteTitle": "Delete product",
        "products.deleteMessage": "Are you sure you want to delete this product?",
        "products.filterCategory": "All categories",
        "products.noResults": "No products found",
        "common.delete": "Delete",
        "common.cancel": "Cancel",
    },
    "fr": {
        "products.errorLoad": "Erreur lors du chargement des produits",
        "products.errorSave": "Erreur lors de l'enregistrement du produit",
        "products.errorDelete": "Erreur lors de la suppression du produit",
        "products.errorToggle": "Erreur lors du changement de statut",
        "products.errorUpload": "Erreur lors de l'upload de l'image",
        "products.createSuccess": "Produit créé avec succès",
        "products.updateSuccess": "Produit mis à jour avec succès",
        "products.deleteSuccess": "Produit supprimé avec succès",
        "products.toggleSuccess": "Statut du produit mis à jour",
        "products.deleteTitle": "Supprimer le produit",
        "products.deleteMessage": "Êtes-vous sûr de vouloir supprimer ce produit ?",
        "products.filterCategory": "Toutes les catégories",
        "products.noResults": "Aucun produit trouvé",
        "common.delete": "Supprimer",
        "common.cancel": "Annuler",
    },
}


class MessageCatalog:
    def __init__(
        self,
        language: str = DEFAULT_LANGUAGE,
        tables: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> None:
        self._tables = dict(tables if tables is not None else BUILTIN_MESSAGES)
        self._language = language

    @property
    def language(self) -> str:
        return self._language

    def set_language(self, language: str) -> None:
        self._language = language

    def get(self, key: str, default: Optional[str] = None) -> str:
        table = self._tables.get(self._language, {})
        if key in table:
            return table[key]
        if default is not None:
            return default
        fallback = self._tables.get(DEFAULT_LANGUAGE, {})
        return fallback.get(key, key)
