# routers/recurrentes.py
# Sin `from __future__ import annotations`: FastAPI necesita el tipo real
# del body, que aquí llega como parámetro de la fábrica.
from typing import List, Type

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from finanzas.auth import get_current_user
from finanzas.core.conciliacion import Conciliador
from finanzas.core.dbutils import _fix_json
from finanzas.core.recurrentes import Entidad, ServicioRecurrente
from finanzas.deps import get_reloj, get_store


def crear_router(entidad: Entidad, schema: Type[BaseModel], prefix: str, tag: str) -> APIRouter:
    """CRUD, total mensual, agrupación por día y conciliación para una Entidad."""
    router = APIRouter(prefix=prefix, tags=[tag])

    def _body(b: BaseModel) -> dict:
        return b.model_dump(exclude={"id"})

    @router.post("", status_code=201)
    def crear(body: schema, usuario_id: int = Depends(get_current_user), store=Depends(get_store)):
        row = ServicioRecurrente(store, entidad).crear(usuario_id, _body(body))
        return {"ok": True, "mensaje": "Registrado con éxito.", "data": _fix_json([row])[0]}

    @router.get("")
    def listar(usuario_id: int = Depends(get_current_user), store=Depends(get_store)):
        rows = ServicioRecurrente(store, entidad).listar(usuario_id)
        return {"ok": True, "data": _fix_json(rows)}

    @router.get("/total-mensual")
    def total_mensual(usuario_id: int = Depends(get_current_user), store=Depends(get_store)):
        total = ServicioRecurrente(store, entidad).total_mensual(usuario_id)
        return {"ok": True, "total": float(total)}

    @router.get("/agrupados")
    def agrupados(usuario_id: int = Depends(get_current_user), store=Depends(get_store)):
        grupos = ServicioRecurrente(store, entidad).agrupados(usuario_id)
        return {"ok": True, "data": [dict(g.to_dict(), items=_fix_json(g.items)) for g in grupos]}

    @router.put("/conciliar")
    def conciliar(body: List[schema], usuario_id: int = Depends(get_current_user), store=Depends(get_store)):
        res = Conciliador(store, entidad).conciliar(usuario_id, [b.model_dump() for b in body])
        return {"ok": res.completo, "data": res.to_dict()}

    @router.put("/{id}")
    def actualizar(id: int, body: schema, usuario_id: int = Depends(get_current_user), store=Depends(get_store)):
        ServicioRecurrente(store, entidad).actualizar(usuario_id, id, _body(body))
        return {"ok": True, "mensaje": "Actualizado con éxito."}

    @router.delete("/{id}")
    def eliminar(id: int, usuario_id: int = Depends(get_current_user), store=Depends(get_store)):
        ServicioRecurrente(store, entidad).eliminar(usuario_id, id)
        return {"ok": True, "mensaje": "Eliminado con éxito."}

    return router
