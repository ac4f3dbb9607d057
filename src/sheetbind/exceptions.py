class SheetBindError(Exception):
    """Base exception for sheetbind errors."""
    pass

class ConfigError(SheetBindError):
    """Configuration loading specific errors."""
    pass

class DataSourceError(SheetBindError):
    """Workbook / Sheets API access errors."""
    pass

class SchemaDefinitionError(SheetBindError):
    """A record type declares its columns incorrectly."""
    pass

class FormulaTemplateError(SheetBindError):
    """Unknown formula template or missing placeholder binding."""
    pass
