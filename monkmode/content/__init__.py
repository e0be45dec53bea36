from .deck import ContentError, Deck, import_bulk_json, load_seed

__all__ = ["ContentError", "Deck", "import_bulk_json", "load_seed"]
