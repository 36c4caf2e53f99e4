# routers/ahorro.py
from fastapi import APIRouter, Depends

from finanzas.auth import get_current_user
from finanzas.core.ahorro import Ahorro, ancho_barra, progreso
from finanzas.core.dbutils import _fix_json
from finanzas.deps import get_reloj, get_store
from finanzas.schemas import AhorroIn, ValorIn

router = APIRouter(prefix="/ahorro", tags=["Ahorro"])

def _salida(row: dict) -> dict:
    data = _fix_json([row])[0]
    data["progreso"] = progreso(row.get("valor_actual"), row.get("valor_meta"))
    data["ancho_barra"] = ancho_barra(row.get("valor_actual"), row.get("valor_meta"))
    return data

@router.get("")
def obtener_ahorro(usuario_id: int = Depends(get_current_user),
                   store=Depends(get_store), reloj=Depends(get_reloj)):
    return {"ok": True, "data": _salida(Ahorro(store, reloj).obtener(usuario_id))}

@router.post("")
def guardar_ahorro(body: AhorroIn, usuario_id: int = Depends(get_current_user),
                   store=Depends(get_store), reloj=Depends(get_reloj)):
    row = Ahorro(store, reloj).guardar(usuario_id, body.valor_actual, body.valor_meta)
    return {"ok": True, "mensaje": "Ahorro guardado con éxito.", "data": _salida(row)}

@router.post("/agregar")
def agregar_valor(body: ValorIn, usuario_id: int = Depends(get_current_user),
                  store=Depends(get_store), reloj=Depends(get_reloj)):
    row = Ahorro(store, reloj).agregar(usuario_id, body.valor)
    return {"ok": True, "mensaje": "Valor agregado con éxito.", "data": _salida(row)}

@router.post("/retirar")
def retirar_valor(body: ValorIn, usuario_id: int = Depends(get_current_user),
                  store=Depends(get_store), reloj=Depends(get_reloj)):
    row = Ahorro(store, reloj).retirar(usuario_id, body.valor)
    return {"ok": True, "mensaje": "Valor retirado con éxito.", "data": _salida(row)}
