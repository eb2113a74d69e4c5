from daybook.ingestion.orderbook import extract_records, load_order_book

__all__ = ["extract_records", "load_order_book"]
