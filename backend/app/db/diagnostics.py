"""
Checks that the connected schema exposes every stored procedure the
repositories call.
"""
from typing import List

from sqlalchemy import text
from sqlalchemy.engine import Connection

REQUIRED_PROCEDURES = (
    "obtener_viajes",
    "obtener_viaje",
    "insertar_viaje",
    "actualizar_viaje",
    "eliminar_viaje",
    "insertar_servicio_viaje",
    "actualizar_servicio_viaje",
    "eliminar_servicio_viaje",
    "resumen_financiero",
)


def find_missing_procedures(conn: Connection) -> List[str]:
    """Return the required procedures absent from the current schema, in declaration order."""
    result = conn.execute(text("""
        SELECT ROUTINE_NAME
        FROM information_schema.ROUTINES
        WHERE ROUTINE_SCHEMA = DATABASE()
        AND ROUTINE_TYPE = 'PROCEDURE'
    """))
    present = {str(name).lower() for name in result.scalars()}
    return [name for name in REQUIRED_PROCEDURES if name not in present]
