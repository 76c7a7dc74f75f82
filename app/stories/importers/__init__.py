from app.stories.importers.normalizer import RowNormalizer
from app.stories.importers.parser import parse_csv
from app.stories.importers.service import ImportService
from app.stories.importers.validator import validate_row

__all__ = ["ImportService", "RowNormalizer", "parse_csv", "validate_row"]
