from api import roles
from api.resources import Resource, build_blueprint
from models.schemas.color import ColorCreateSchema, ColorOutSchema
from models.schemas.common import SearchQuerySchema

resource = Resource(
    name="colors",
    url_prefix="/colors",
    tag="Colors",
    label="Color",
    create_schema=ColorCreateSchema,
    out_schema=ColorOutSchema,
    read_roles=roles.WAREHOUSE_READERS,
    write_roles=roles.MANAGERS,
    delete_roles=roles.ADMINS,
    stats_roles=roles.MANAGERS,
    search_query_schema=SearchQuerySchema,
)

bp = build_blueprint(resource)
