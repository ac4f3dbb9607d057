from sheetbind.domain.models import DiagnosticMessage, MessageCategory, MessageLevel


def create_error(message: str, category: MessageCategory = MessageCategory.GENERAL) -> DiagnosticMessage:
    return DiagnosticMessage(level=MessageLevel.ERROR, category=category, message=message)


def create_warning(message: str, category: MessageCategory = MessageCategory.GENERAL) -> DiagnosticMessage:
    return DiagnosticMessage(level=MessageLevel.WARNING, category=category, message=message)


def create_info(message: str, category: MessageCategory = MessageCategory.GENERAL) -> DiagnosticMessage:
    return DiagnosticMessage(level=MessageLevel.INFO, category=category, message=message)


def has_errors(messages) -> bool:
    return any(m.level == MessageLevel.ERROR for m in messages)
