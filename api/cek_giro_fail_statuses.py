from api import roles
from api.resources import Resource, build_blueprint
from models.schemas.cek_giro_fail_status import CekGiroFailStatusCreateSchema, CekGiroFailStatusOutSchema

resource = Resource(
    name="cek_giro_fail_statuses",
    url_prefix="/cek-giro-fail-statuses",
    tag="Cek giro fail statuses",
    label="Cek giro fail status",
    create_schema=CekGiroFailStatusCreateSchema,
    out_schema=CekGiroFailStatusOutSchema,
    read_roles=roles.READERS,
    write_roles=roles.MANAGERS,
    delete_roles=roles.ADMINS,
    stats_roles=roles.MANAGERS,
)

bp = build_blueprint(resource)
