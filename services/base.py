"""
Generic CRUD + list + stats service, parameterized by an EntityDescriptor.

Every reference entity (banks, branches, colors, ...) is one descriptor
handed to EntityService; entity-specific lookups live in small subclasses.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import and_, func

from services.pagination import (
    DEFAULT_MAX_LIMIT,
    build_order_by,
    build_result,
    build_text_search_filter,
    parse_params,
)
from utils.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# A validator returns an error message, or None when the value is acceptable.
Validator = Callable[[Any], Optional[str]]

DEFAULT_SORT_FIELDS = {"createdAt": "created_at"}


def exact_length(n: int, message: str) -> Validator:
    return lambda value: None if value is None or len(value) == n else message


def max_length(n: int, message: str) -> Validator:
    return lambda value: None if value is None or len(value) <= n else message


def matches(pattern: str, message: str, flags: int = 0) -> Validator:
    compiled = re.compile(pattern, flags)
    return lambda value: None if value is None or compiled.fullmatch(value) else message


@dataclass(frozen=True)
class UniqueRule:
    """One or more columns whose combined values must be unique."""
    fields: Tuple[str, ...]
    message: str
    case_insensitive: bool = False

    @property
    def field(self) -> str:
        return ",".join(self.fields)


@dataclass(frozen=True)
class ReferenceCheck:
    """Child rows pointing at the parent's natural key through `column`."""
    model: Any
    column: str
    label: str


@dataclass
class EntityDescriptor:
    model: Any
    label: str
    natural_key: Optional[str] = "code"
    uppercase_code: bool = True
    unique_rules: Sequence[UniqueRule] = ()
    validators: Mapping[str, Sequence[Validator]] = field(default_factory=dict)
    searchable_fields: Sequence[str] = ()
    filter_fields: Sequence[str] = ()
    sort_fields: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_SORT_FIELDS))
    default_sort: str = "createdAt"
    references: Sequence[ReferenceCheck] = ()
    usage_reference: Optional[ReferenceCheck] = None
    group_by: Sequence[str] = ()


class EntityService:
    """CRUD for one model. Stateless apart from the injected storage."""

    def __init__(self, storage, descriptor: EntityDescriptor, max_limit: int = DEFAULT_MAX_LIMIT):
        self.storage = storage
        self.descriptor = descriptor
        self.model = descriptor.model
        self.max_limit = max_limit

    @property
    def session(self):
        return self.storage.get_session()

    # ---------- helpers ----------

    def _column(self, name: str):
        return getattr(self.model, name)

    def _normalize(self, data: Dict[str, Any]) -> Dict[str, Any]:
        key = self.descriptor.natural_key
        if self.descriptor.uppercase_code and key and isinstance(data.get(key), str):
            data[key] = data[key].upper()
        return data

    def _check_unique(self, data: Mapping[str, Any], existing=None) -> None:
        for rule in self.descriptor.unique_rules:
            if not any(f in data for f in rule.fields):
                continue
            criteria = []
            for name in rule.fields:
                value = data[name] if name in data else getattr(existing, name, None)
                column = self._column(name)
                if rule.case_insensitive and isinstance(value, str):
                    criteria.append(func.lower(column) == value.lower())
                else:
                    criteria.append(column == value)
            if existing is not None:
                criteria.append(self.model.id != existing.id)
            if self.storage.count(self.model, *criteria):
                raise ConflictError(rule.message, field=rule.field)

    def _validate(self, data: Mapping[str, Any]) -> None:
        for name, checks in self.descriptor.validators.items():
            if name not in data:
                continue
            for check in checks:
                message = check(data[name])
                if message:
                    raise ValidationError(message, details={name: [message]})

    def _get_or_404(self, id: int):
        obj = self.storage.get(self.model, id)
        if obj is None:
            raise NotFoundError(f"{self.descriptor.label} not found")
        return obj

    def _sort_column(self, sort_by: str):
        attr = self.descriptor.sort_fields.get(sort_by)
        if attr is None:
            allowed = ", ".join(self.descriptor.sort_fields)
            raise ValidationError(
                f"Unsupported sort field. Allowed: {allowed}",
                details={"sortBy": [f"Must be one of: {allowed}."]},
            )
        return self._column(attr)

    def _criteria(self, query: Mapping[str, Any]) -> List[Any]:
        criteria = []
        columns = [self._column(name) for name in self.descriptor.searchable_fields]
        search = build_text_search_filter(query.get("search"), columns)
        if search is not None:
            criteria.append(search)
        for name in self.descriptor.filter_fields:
            value = query.get(name)
            if value is not None:
                criteria.append(self._column(name) == value)
        return criteria

    # ---------- operations ----------

    def create(self, data: Mapping[str, Any]):
        data = self._normalize(dict(data))
        self._check_unique(data)
        self._validate(data)
        obj = self.model(**data)
        self.storage.new(obj)
        self.storage.save()
        logger.info("Created %s id=%s", self.descriptor.label.lower(), obj.id)
        return obj

    def get_by_id(self, id: int):
        return self.storage.get(self.model, id)

    def get_by_code(self, code: str):
        key = self.descriptor.natural_key
        if key is None:
            return None
        if self.descriptor.uppercase_code and isinstance(code, str):
            code = code.upper()
        return self.session.query(self.model).filter(self._column(key) == code).first()

    def update(self, id: int, data: Mapping[str, Any]):
        obj = self._get_or_404(id)
        data = self._normalize(dict(data))
        self._check_unique(data, existing=obj)
        self._validate(data)
        for key, value in data.items():
            setattr(obj, key, value)
        self.storage.save()
        logger.info("Updated %s id=%s fields=%s", self.descriptor.label.lower(), obj.id, sorted(data))
        return obj

    def delete(self, id: int) -> None:
        obj = self._get_or_404(id)
        label = self.descriptor.label.lower()
        key_value = getattr(obj, self.descriptor.natural_key) if self.descriptor.natural_key else obj.id
        for ref in self.descriptor.references:
            in_use = self.storage.count(ref.model, getattr(ref.model, ref.column) == key_value)
            if in_use:
                logger.info("Refused to delete %s id=%s: %d %s", label, obj.id, in_use, ref.label)
                raise ConflictError(
                    f"Cannot delete {label}. It is referenced by {ref.label}.",
                    details={"references": ref.label, "count": in_use},
                )
        self.storage.delete(obj)
        self.storage.save()
        logger.info("Deleted %s id=%s", label, obj.id)

    def list(self, query: Optional[Mapping[str, Any]] = None, criteria: Sequence[Any] = (),
             default_sort: Optional[str] = None) -> Dict[str, Any]:
        """
        Page through rows matching the search term, discriminator filters and
        any extra criteria. Returns {"data": [...], "pagination": {...}}.
        """
        query = query or {}
        params = parse_params(query, default_sort or self.descriptor.default_sort, self.max_limit)
        order_column = self._sort_column(params.sort_by)

        q = self.session.query(self.model)
        where = self._criteria(query) + list(criteria)
        if where:
            q = q.filter(and_(*where))

        total = q.count()
        rows = (
            q.order_by(build_order_by(order_column, params.sort_order), self.model.id.asc())
            .offset(params.skip)
            .limit(params.limit)
            .all()
        )
        return build_result(rows, params.page, params.limit, total)

    def stats(self) -> Dict[str, Any]:
        total = self.storage.count(self.model)
        result: Dict[str, Any] = {"total": total}

        ref = self.descriptor.usage_reference
        if ref is not None and self.descriptor.natural_key:
            key_column = self._column(self.descriptor.natural_key)
            used = (
                self.session.query(func.count(func.distinct(self.model.id)))
                .select_from(self.model)
                .join(ref.model, getattr(ref.model, ref.column) == key_column)
                .scalar()
            ) or 0
            result["withReferences"] = used
            result["withoutReferences"] = total - used

        for name in self.descriptor.group_by:
            column = self._column(name)
            rows = self.session.query(column, func.count(self.model.id)).group_by(column).all()
            result["by" + _camel_head(name)] = {
                getattr(value, "value", value): count for value, count in rows if value is not None
            }
        return result


def _camel_head(name: str) -> str:
    """price_type -> PriceType"""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_"))
