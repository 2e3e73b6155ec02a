from .table_service import build_table, clear_table_cache, get_cached_table  # noqa: F401 re-export

__all__ = ["build_table", "clear_table_cache", "get_cached_table"]
