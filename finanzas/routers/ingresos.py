# routers/ingresos.py
from fastapi import Depends

from finanzas.auth import get_current_user
from finanzas.core.dbutils import _fix_json
from finanzas.core.recurrentes import INGRESOS, ServicioRecurrente
from finanzas.deps import get_reloj, get_store
from finanzas.routers.recurrentes import crear_router
from finanzas.schemas import IngresoIn

router = crear_router(INGRESOS, IngresoIn, prefix="/ingresos", tag="Ingresos")

@router.get("/proximos")
def proximos_ingresos(usuario_id: int = Depends(get_current_user),
                      store=Depends(get_store), reloj=Depends(get_reloj)):
    rows = ServicioRecurrente(store, INGRESOS, reloj).proximos(usuario_id)
    return {"ok": True, "data": _fix_json(rows)}
