from api import roles
from api.resources import Resource, build_blueprint
from models.schemas.bank import BankCreateSchema, BankOutSchema

resource = Resource(
    name="banks",
    url_prefix="/banks",
    tag="Banks",
    label="Bank",
    create_schema=BankCreateSchema,
    out_schema=BankOutSchema,
    read_roles=roles.READERS,
    write_roles=roles.MANAGERS,
    delete_roles=roles.ADMINS,
    stats_roles=roles.MANAGERS,
)

bp = build_blueprint(resource)
