from flask import request

from api import roles
from api.resources import Resource, build_blueprint, enum_path_param
from api.utils.responses import paginated, success
from models.enums import Module
from models.schemas.common import ListQuerySchema
from models.schemas.phone import PhoneCreateSchema, PhoneListQuerySchema, PhoneOutSchema
from utils.decorators import current_services, roles_required
from utils.exceptions import NotFoundError

resource = Resource(
    name="phones",
    url_prefix="/phones",
    tag="Phones",
    label="Phone",
    create_schema=PhoneCreateSchema,
    out_schema=PhoneOutSchema,
    list_query_schema=PhoneListQuerySchema,
    read_roles=roles.READERS,
    write_roles=roles.MANAGERS,
    delete_roles=roles.ADMINS,
    stats_roles=roles.MANAGERS,
    by_code=False,
)

bp = build_blueprint(resource)

page_query_schema = ListQuerySchema()
out_schema = PhoneOutSchema()
out_list_schema = PhoneOutSchema(many=True)


@bp.get("/number/<phone>")
@roles_required(roles.READERS)
def get_phone_by_number(phone: str):
    """
    Look up a phone record by its number
    ---
    tags: [Phones]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: phone
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    record = current_services().phones.get_by_number(phone)
    if record is None:
        raise NotFoundError("Phone not found")
    return success(out_schema.dump(record))


@bp.get("/owner/<owner_code>")
@roles_required(roles.READERS)
def list_phones_by_owner(owner_code: str):
    """
    All phone numbers of one owner, optionally narrowed to a module
    ---
    tags: [Phones]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: owner_code
        type: string
        required: true
      - in: query
        name: module
        type: string
    responses:
      200: { description: OK }
    """
    module = request.args.get("module")
    if module:
        module = enum_path_param(Module, module, "module")
    phones = current_services().phones.list_by_owner(owner_code, module or None)
    return success(out_list_schema.dump(phones))


@bp.get("/module/<module>")
@roles_required(roles.READERS)
def list_phones_by_module(module: str):
    """
    List phones belonging to one module
    ---
    tags: [Phones]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: module
        type: string
        required: true
      - in: query
        name: page
        type: integer
      - in: query
        name: limit
        type: integer
    responses:
      200: { description: OK }
      400: { description: Unknown module }
    """
    value = enum_path_param(Module, module, "module")
    query = page_query_schema.load(request.args)
    return paginated(current_services().phones.list_by_module(value, query), out_list_schema)
