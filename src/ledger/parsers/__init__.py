from ledger.parsers.csv_reader import RawRow, is_complete, iter_csv_rows

__all__ = ["RawRow", "is_complete", "iter_csv_rows"]
