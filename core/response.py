def message(text: str, data=None):
    """Success envelope: {message} or {message, data}."""
    if data is None:
        return {"message": text}
    return {"message": text, "data": data}


def error(text: str = "Internal server error", code: str = "internal_error", trace_id: str | None = None):
    """Error envelope for 5xx responses; never includes driver detail."""
    err = {"code": code}
    if trace_id:
        err["trace_id"] = trace_id
    return {"message": text, "error": err}
