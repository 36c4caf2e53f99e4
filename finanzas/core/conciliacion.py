# core/conciliacion.py
"""
Sincroniza la lista completa que envía el cliente (cuentas fijas o
ingresos) con lo guardado para el usuario:

  1. sin id            -> se crea
  2. id ya guardado    -> se actualiza (reemplazo completo)
  3. id guardado que ya no viene en la lista -> se elimina

El conjunto a eliminar se calcula con los ids leídos ANTES de crear y
actualizar. Es de mejor esfuerzo: cada fallo se registra en el log y en
el resultado, y el resto de los items se sigue procesando. No hay
transacción que envuelva los pasos; el cliente reintenta si algo falló.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from finanzas.core.errores import ErrorValidacion, exigir_usuario, frontera
from finanzas.core.recurrentes import Entidad
from finanzas.core.resumen import a_entero

logger = logging.getLogger("uvicorn.error")


@dataclass
class ResultadoConciliacion:
    creados: List[int] = field(default_factory=list)
    actualizados: List[int] = field(default_factory=list)
    eliminados: List[int] = field(default_factory=list)
    fallidos: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def completo(self) -> bool:
        return not self.fallidos

    def to_dict(self) -> Dict[str, Any]:
        return {
            "creados": self.creados,
            "actualizados": self.actualizados,
            "eliminados": self.eliminados,
            "fallidos": self.fallidos,
            "completo": self.completo,
        }


def _id_de(item: Dict[str, Any]) -> Optional[int]:
    v = item.get("id")
    if v in (None, ""):
        return None
    return a_entero(v)


class Conciliador:
    def __init__(self, store, entidad: Entidad):
        self.store = store
        self.entidad = entidad

    @frontera("Error al guardar la lista.")
    def conciliar(self, usuario_id, enviados: Sequence[Dict[str, Any]]) -> ResultadoConciliacion:
        exigir_usuario(usuario_id)
        if enviados is None:
            raise ErrorValidacion("Lista no enviada.")

        # validación completa antes de tocar la base
        preparados = []
        for pos, item in enumerate(enviados):
            try:
                data = self.entidad.validar(item)
            except ErrorValidacion as e:
                raise ErrorValidacion(f"Item {pos + 1}: {e.mensaje}")
            preparados.append((_id_de(item), data))

        tabla = self.entidad.tabla
        ids_guardados = [r["id"] for r in self.store.listar(tabla, usuario_id)]
        res = ResultadoConciliacion()

        for id, data in preparados:
            try:
                if id is None:
                    row = self.store.insertar(tabla, dict(data, usuario_id=usuario_id))
                    res.creados.append(row["id"])
                elif id in ids_guardados:
                    if self.store.actualizar(tabla, id, usuario_id, data) == 0:
                        raise LookupError(self.entidad.no_encontrado)
                    res.actualizados.append(id)
                else:
                    raise LookupError(self.entidad.no_encontrado)
            except LookupError as e:
                logger.warning("Conciliación %s: id=%s omitido (%s)", tabla, id, e)
                res.fallidos.append({"id": id, "operacion": "actualizar", "error": str(e)})
            except Exception:
                logger.exception("Conciliación %s: fallo al guardar id=%s", tabla, id)
                res.fallidos.append({"id": id, "operacion": "crear" if id is None else "actualizar",
                                     "error": "No se pudo guardar."})

        ids_enviados = {id for id, _ in preparados if id is not None}
        for id in [i for i in ids_guardados if i not in ids_enviados]:
            try:
                if self.store.eliminar(tabla, id, usuario_id) == 0:
                    logger.warning("Conciliación %s: id=%s ya no existe", tabla, id)
                    res.fallidos.append({"id": id, "operacion": "eliminar", "error": self.entidad.no_encontrado})
                    continue
                res.eliminados.append(id)
            except Exception:
                logger.exception("Conciliación %s: fallo al eliminar id=%s", tabla, id)
                res.fallidos.append({"id": id, "operacion": "eliminar", "error": "No se pudo eliminar."})

        logger.info(
            "Conciliación %s (usuario=%s): %d creados, %d actualizados, %d eliminados, %d fallidos",
            tabla, usuario_id, len(res.creados), len(res.actualizados), len(res.eliminados), len(res.fallidos),
        )
        return res
