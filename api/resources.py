"""
Blueprint factory for the reference-entity collections.

Every collection exposes the same routes (list, stats, get by id / code,
create, update, delete); entity modules add their extra lookups on the
returned blueprint.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Type

from flasgger import swag_from
from flask import Blueprint, request
from marshmallow import Schema, ValidationError, fields

from api.utils.responses import created, deleted, paginated, success, updated
from models.schemas.common import ListQuerySchema
from utils.decorators import current_services, roles_required
from utils.exceptions import NotFoundError


@dataclass
class Resource:
    name: str               # blueprint name and ServiceRegistry attribute
    url_prefix: str         # "/banks"
    tag: str                # swagger tag
    label: str              # "Bank"
    create_schema: Type[Schema]
    out_schema: Type[Schema]
    read_roles: Iterable
    write_roles: Iterable
    delete_roles: Iterable
    stats_roles: Iterable
    list_query_schema: Type[Schema] = ListQuerySchema
    search_query_schema: Optional[Type[Schema]] = None
    by_code: bool = True

    def service(self):
        return getattr(current_services(), self.name)


def enum_path_param(enum_cls, value: str, name: str):
    """Parse a path segment into enum_cls; unknown values are a 400 like any body field."""
    try:
        return fields.Enum(enum_cls).deserialize(value)
    except ValidationError as err:
        raise ValidationError({name: err.messages})


def _body():
    return request.get_json(silent=True) or {}


def _doc(resource: Resource, summary: str, responses: dict, parameters: list | None = None):
    return {
        "tags": [resource.tag],
        "summary": summary,
        "security": [{"Bearer": []}],
        "parameters": parameters or [],
        "responses": responses,
    }


def _id_param(resource: Resource):
    return {"in": "path", "name": "entity_id", "type": "integer", "required": True,
            "description": f"{resource.label} id"}


LIST_PARAMS = [
    {"in": "query", "name": "page", "type": "integer", "default": 1},
    {"in": "query", "name": "limit", "type": "integer", "default": 10},
    {"in": "query", "name": "sortBy", "type": "string"},
    {"in": "query", "name": "sortOrder", "type": "string", "enum": ["asc", "desc"]},
    {"in": "query", "name": "search", "type": "string"},
]


def build_blueprint(resource: Resource) -> Blueprint:
    bp = Blueprint(resource.name, __name__, url_prefix=resource.url_prefix)
    create_schema = resource.create_schema()
    out_schema = resource.out_schema()
    out_list_schema = resource.out_schema(many=True)
    list_query_schema = resource.list_query_schema()
    label = resource.label

    @swag_from(_doc(resource, f"List {resource.tag.lower()}", {200: {"description": "OK"}}, LIST_PARAMS))
    @roles_required(resource.read_roles)
    def list_entities():
        query = list_query_schema.load(request.args)
        return paginated(resource.service().list(query), out_list_schema)

    @swag_from(_doc(resource, f"{label} statistics", {200: {"description": "OK"}}))
    @roles_required(resource.stats_roles)
    def entity_stats():
        return success(resource.service().stats())

    @swag_from(_doc(resource, f"Get a {label.lower()} by id",
                    {200: {"description": "OK"}, 404: {"description": "Not found"}},
                    [_id_param(resource)]))
    @roles_required(resource.read_roles)
    def get_entity(entity_id: int):
        obj = resource.service().get_by_id(entity_id)
        if obj is None:
            raise NotFoundError(f"{label} not found")
        return success(out_schema.dump(obj))

    @swag_from(_doc(resource, f"Create a {label.lower()}",
                    {201: {"description": "Created"}, 400: {"description": "Validation error"},
                     409: {"description": "Already exists"}},
                    [{"in": "body", "name": "body", "required": True, "schema": {"type": "object"}}]))
    @roles_required(resource.write_roles)
    def create_entity():
        data = create_schema.load(_body())
        obj = resource.service().create(data)
        return created(out_schema.dump(obj), f"{label} created successfully")

    @swag_from(_doc(resource, f"Update a {label.lower()} (partial)",
                    {200: {"description": "OK"}, 404: {"description": "Not found"},
                     409: {"description": "Already exists"}},
                    [_id_param(resource),
                     {"in": "body", "name": "body", "required": True, "schema": {"type": "object"}}]))
    @roles_required(resource.write_roles)
    def update_entity(entity_id: int):
        data = create_schema.load(_body(), partial=True)
        obj = resource.service().update(entity_id, data)
        return updated(out_schema.dump(obj), f"{label} updated successfully")

    @swag_from(_doc(resource, f"Delete a {label.lower()}",
                    {200: {"description": "Deleted"}, 404: {"description": "Not found"},
                     409: {"description": "Still referenced"}},
                    [_id_param(resource)]))
    @roles_required(resource.delete_roles)
    def delete_entity(entity_id: int):
        resource.service().delete(entity_id)
        return deleted(f"{label} deleted successfully")

    bp.add_url_rule("", "list", list_entities, methods=["GET"])
    bp.add_url_rule("", "create", create_entity, methods=["POST"])
    bp.add_url_rule("/stats", "stats", entity_stats, methods=["GET"])
    bp.add_url_rule("/<int:entity_id>", "get", get_entity, methods=["GET"])
    bp.add_url_rule("/<int:entity_id>", "update", update_entity, methods=["PUT"])
    bp.add_url_rule("/<int:entity_id>", "delete", delete_entity, methods=["DELETE"])

    if resource.by_code:
        @swag_from(_doc(resource, f"Get a {label.lower()} by code",
                        {200: {"description": "OK"}, 404: {"description": "Not found"}},
                        [{"in": "path", "name": "code", "type": "string", "required": True}]))
        @roles_required(resource.read_roles)
        def get_entity_by_code(code: str):
            obj = resource.service().get_by_code(code)
            if obj is None:
                raise NotFoundError(f"{label} not found")
            return success(out_schema.dump(obj))

        bp.add_url_rule("/code/<code>", "get_by_code", get_entity_by_code, methods=["GET"])

    if resource.search_query_schema is not None:
        search_schema = resource.search_query_schema()

        @swag_from(_doc(resource, f"Search {resource.tag.lower()}", {200: {"description": "OK"}},
                        LIST_PARAMS + [{"in": "query", "name": "q", "type": "string"}]))
        @roles_required(resource.read_roles)
        def search_entities():
            query = search_schema.load(request.args)
            term = query.pop("q", None)
            if term:
                query["search"] = term
            return paginated(resource.service().list(query), out_list_schema)

        bp.add_url_rule("/search", "search", search_entities, methods=["GET"])

    return bp
