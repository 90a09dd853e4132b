from flask import request

from api import roles
from api.resources import Resource, build_blueprint, enum_path_param
from api.utils.responses import paginated
from models.enums import PriceType
from models.schemas.branch import BranchCreateSchema, BranchListQuerySchema, BranchOutSchema
from models.schemas.common import ListQuerySchema
from utils.decorators import current_services, roles_required

resource = Resource(
    name="branches",
    url_prefix="/branches",
    tag="Branches",
    label="Branch",
    create_schema=BranchCreateSchema,
    out_schema=BranchOutSchema,
    list_query_schema=BranchListQuerySchema,
    read_roles=roles.READERS,
    write_roles=roles.ADMINS,
    delete_roles=roles.ADMINS,
    stats_roles=roles.MANAGERS,
)

bp = build_blueprint(resource)

page_query_schema = ListQuerySchema()
out_list_schema = BranchOutSchema(many=True)


@bp.get("/price-type/<price_type>")
@roles_required(roles.READERS)
def list_branches_by_price_type(price_type: str):
    """
    List branches with one price type
    ---
    tags: [Branches]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: price_type
        type: string
        enum: [ECER, GROSIR]
        required: true
      - in: query
        name: page
        type: integer
      - in: query
        name: limit
        type: integer
      - in: query
        name: sortBy
        type: string
        description: "Allowed: name, code, createdAt"
      - in: query
        name: sortOrder
        type: string
        enum: [asc, desc]
    responses:
      200: { description: OK }
      400: { description: Unknown price type }
    """
    value = enum_path_param(PriceType, price_type, "priceType")
    query = page_query_schema.load(request.args)
    return paginated(current_services().branches.list_by_price_type(value, query), out_list_schema)
