from rakugaki.infrastructure.stores.artwork_store import ArtworkStore

__all__ = ["ArtworkStore"]
