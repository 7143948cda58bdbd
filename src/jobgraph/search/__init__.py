from .index import SearchIndex, build_index, lookup

__all__ = ["SearchIndex", "build_index", "lookup"]
