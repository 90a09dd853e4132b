from marshmallow import EXCLUDE, Schema, fields, pre_load, validate


def _strip(value):
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        return {k: _strip(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_strip(v) for v in value]
    return value


def required_string(max_length=None, label="Value", **kwargs):
    """Non-blank string field; max_length also enforced when given."""
    validators = [validate.Length(min=1, error=f"{label} is required")]
    if max_length is not None:
        validators.append(validate.Length(max=max_length, error=f"{label} must be at most {max_length} characters"))
    return fields.String(required=True, validate=validators, **kwargs)


def optional_string(max_length, label="Value"):
    return fields.String(
        allow_none=True,
        validate=validate.Length(max=max_length, error=f"{label} must be at most {max_length} characters"),
    )


def non_negative_number(**kwargs):
    return fields.Float(allow_none=True, validate=validate.Range(min=0), **kwargs)


class InputSchema(Schema):
    """Request bodies: unknown keys rejected, surrounding whitespace trimmed."""

    @pre_load
    def trim_strings(self, data, **kwargs):
        return _strip(data) if isinstance(data, dict) else data


class ListQuerySchema(Schema):
    """
    Query string of every list endpoint. page/limit stay raw: the pagination
    engine coerces them and falls back to defaults instead of rejecting.
    """

    class Meta:
        unknown = EXCLUDE

    page = fields.Raw(load_default=None)
    limit = fields.Raw(load_default=None)
    sort_by = fields.String(data_key="sortBy", load_default=None)
    sort_order = fields.String(data_key="sortOrder", load_default=None)
    search = fields.String(load_default=None)

    @pre_load
    def drop_blank(self, data, **kwargs):
        # query strings arrive as a MultiDict; keep the first value per key
        items = data.items() if hasattr(data, "items") else []
        return {k: v for k, v in items if v not in (None, "")}


class SearchQuerySchema(ListQuerySchema):
    """`?q=` alias used by the /search endpoints."""

    q = fields.String(load_default=None)


class TimestampedOutSchema(Schema):
    id = fields.Integer()
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
