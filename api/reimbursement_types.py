from api import roles
from api.resources import Resource, build_blueprint
from models.schemas.reimbursement_type import ReimbursementTypeCreateSchema, ReimbursementTypeOutSchema

resource = Resource(
    name="reimbursement_types",
    url_prefix="/reimbursement-types",
    tag="Reimbursement types",
    label="Reimbursement type",
    create_schema=ReimbursementTypeCreateSchema,
    out_schema=ReimbursementTypeOutSchema,
    read_roles=roles.READERS,
    write_roles=roles.ADMINS,
    delete_roles=roles.ADMINS,
    stats_roles=roles.MANAGERS,
)

bp = build_blueprint(resource)
