def first_error(errors, default="Invalid request", include_field=True):
    """
    Flatten DRF serializer errors into one user-facing line,
    e.g. {"total": ["A valid integer is required."]} -> "total: A valid integer is required."
    """
    if isinstance(errors, dict):
        for field, detail in errors.items():
            message = first_error(detail, default, include_field)
            if field == "non_field_errors" or not include_field:
                return message
            return f"{field}: {message}"
    if isinstance(errors, (list, tuple)):
        for detail in errors:
            # ListSerializer reports valid entries as {}
            if detail:
                return first_error(detail, default, include_field)
    if errors:
        return str(errors)
    return default
