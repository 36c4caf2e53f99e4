# routers/panel.py
from fastapi import APIRouter, Depends

from finanzas.auth import get_current_user
from finanzas.core.ahorro import Ahorro, ancho_barra, progreso
from finanzas.core.dbutils import _fix_json
from finanzas.core.recurrentes import CUENTAS_FIJAS, INGRESOS, ServicioRecurrente
from finanzas.core.resumen import ResumenGastos, saldo_neto
from finanzas.deps import get_reloj, get_store

router = APIRouter(tags=["Panel"])

def _grupos(grupos):
    return [dict(g.to_dict(), items=_fix_json(g.items)) for g in grupos]

@router.get("/panel")
def panel(usuario_id: int = Depends(get_current_user),
          store=Depends(get_store), reloj=Depends(get_reloj)):
    cuentas = ServicioRecurrente(store, CUENTAS_FIJAS, reloj)
    ingresos = ServicioRecurrente(store, INGRESOS, reloj)

    total_cuentas = cuentas.total_mensual(usuario_id)
    total_ingresos = ingresos.total_mensual(usuario_id)
    ahorro = Ahorro(store, reloj).obtener(usuario_id)

    return {"ok": True, "data": {
        "cuentas_fijas": _grupos(cuentas.agrupados(usuario_id)),
        "ingresos": _grupos(ingresos.agrupados(usuario_id)),
        "total_cuentas_fijas": float(total_cuentas),
        "total_ingresos": float(total_ingresos),
        "saldo_neto": float(saldo_neto(total_ingresos, total_cuentas)),
        "gastos_mes": float(ResumenGastos(store, reloj).total_mes_actual(usuario_id)),
        "ahorro": dict(
            _fix_json([ahorro])[0],
            progreso=progreso(ahorro.get("valor_actual"), ahorro.get("valor_meta")),
            ancho_barra=ancho_barra(ahorro.get("valor_actual"), ahorro.get("valor_meta")),
        ),
    }}
