# routers/gastos.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from finanzas.auth import get_current_user
from finanzas.core.dbutils import _fix_json
from finanzas.core.gastos import Gastos
from finanzas.core.resumen import ResumenGastos
from finanzas.deps import get_reloj, get_store
from finanzas.schemas import GastoIn

router = APIRouter(prefix="/gastos", tags=["Gastos"])

# ---------- Endpoints ----------
@router.post("", status_code=201)
def registrar_gasto(body: GastoIn, usuario_id: int = Depends(get_current_user),
                    store=Depends(get_store), reloj=Depends(get_reloj)):
    row = Gastos(store, reloj).registrar(usuario_id, body.descripcion, body.categoria, body.valor)
    return {"ok": True, "mensaje": "Gasto registrado con éxito.", "data": _fix_json([row])[0]}

@router.get("")
def listar_gastos(usuario_id: int = Depends(get_current_user), store=Depends(get_store)):
    rows = Gastos(store).listar(usuario_id)
    return {"ok": True, "data": _fix_json(rows)}

@router.get("/filtrar")
def filtrar_por_periodo(
    inicio: Optional[str] = Query(None, description="YYYY-MM-DD"),
    fin: Optional[str] = Query(None, description="YYYY-MM-DD"),
    usuario_id: int = Depends(get_current_user),
    store=Depends(get_store),
):
    rows = ResumenGastos(store).filtrar_periodo(usuario_id, inicio, fin)
    return {"ok": True, "data": _fix_json(rows)}

@router.get("/categoria")
def filtrar_por_categoria(
    categoria: Optional[str] = Query(None),
    usuario_id: int = Depends(get_current_user),
    store=Depends(get_store),
):
    rows = ResumenGastos(store).filtrar_categoria(usuario_id, categoria)
    return {"ok": True, "data": _fix_json(rows)}

@router.get("/total-categoria")
def total_por_categoria(
    categoria: Optional[str] = Query(None),
    usuario_id: int = Depends(get_current_user),
    store=Depends(get_store),
):
    total = ResumenGastos(store).total_categoria(usuario_id, categoria)
    return {"ok": True, "categoria": categoria, "total": float(total)}

@router.get("/resumen/mes-actual")
def total_mes_actual(usuario_id: int = Depends(get_current_user),
                     store=Depends(get_store), reloj=Depends(get_reloj)):
    total = ResumenGastos(store, reloj).total_mes_actual(usuario_id)
    return {"ok": True, "total": float(total)}

@router.get("/resumen-categorias")
def resumen_por_categoria(usuario_id: int = Depends(get_current_user),
                          store=Depends(get_store), reloj=Depends(get_reloj)):
    rows = ResumenGastos(store, reloj).resumen_por_categoria(usuario_id)
    return {"ok": True, "data": _fix_json(rows)}

@router.get("/total-periodo")
def total_por_periodo(
    inicio: Optional[str] = Query(None, description="YYYY-MM-DD"),
    fin: Optional[str] = Query(None, description="YYYY-MM-DD"),
    usuario_id: int = Depends(get_current_user),
    store=Depends(get_store),
):
    r = ResumenGastos(store).total_periodo(usuario_id, inicio, fin)
    if not r["encontrado"]:
        return {"ok": True, "mensaje": "No hay gastos registrados en ese período.", "total": 0.0}
    return {"ok": True, "total": float(r["total"])}

@router.put("/{id}")
def actualizar_gasto(id: int, body: GastoIn, usuario_id: int = Depends(get_current_user),
                     store=Depends(get_store)):
    Gastos(store).actualizar(usuario_id, id, body.descripcion, body.categoria, body.valor)
    return {"ok": True, "mensaje": "Gasto actualizado con éxito."}

@router.delete("/{id}")
def eliminar_gasto(id: int, usuario_id: int = Depends(get_current_user), store=Depends(get_store)):
    Gastos(store).eliminar(usuario_id, id)
    return {"ok": True, "mensaje": "Gasto eliminado con éxito."}
