# core/store.py
"""
Acceso a las tablas de finanzas (gastos, cuentas_fijas, ingresos, ahorros).

Todas las operaciones van acotadas por usuario_id. Los componentes de
core/ reciben una instancia por constructor, así que en pruebas se puede
reemplazar por cualquier objeto con los mismos métodos.
"""
from __future__ import annotations
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import psycopg2.extras
from psycopg2 import sql

from finanzas.core.dbutils import get_conn, ensure_tablas

TABLAS = {"gastos", "cuentas_fijas", "ingresos"}


def _tabla(nombre: str) -> sql.Identifier:
    if nombre not in TABLAS:
        raise ValueError(f"Tabla no permitida: {nombre}")
    return sql.Identifier(nombre)


class PgStore:
    _tablas_listas = False

    @contextmanager
    def _cursor(self):
        conn = get_conn()
        try:
            if not PgStore._tablas_listas:
                ensure_tablas(conn)
                PgStore._tablas_listas = True
            with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                yield cur
            conn.commit()
        finally:
            conn.close()

    # ------------------------------ CRUD genérico ------------------------------
    def insertar(self, tabla: str, datos: Dict[str, Any]) -> Dict[str, Any]:
        columns = list(datos.keys())
        q = sql.SQL("INSERT INTO {t} ({c}) VALUES ({p}) RETURNING *;").format(
            t=_tabla(tabla),
            c=sql.SQL(", ").join(map(sql.Identifier, columns)),
            p=sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        with self._cursor() as cur:
            cur.execute(q, list(datos.values()))
            return dict(cur.fetchone())

    def listar(self, tabla: str, usuario_id: int, orden: str = "id", desc: bool = False) -> List[Dict[str, Any]]:
        q = sql.SQL("SELECT * FROM {t} WHERE usuario_id = %s ORDER BY {o} {d}, id ASC;").format(
            t=_tabla(tabla),
            o=sql.Identifier(orden),
            d=sql.SQL("DESC" if desc else "ASC"),
        )
        with self._cursor() as cur:
            cur.execute(q, (usuario_id,))
            return [dict(r) for r in cur.fetchall()]

    def actualizar(self, tabla: str, id: int, usuario_id: int, datos: Dict[str, Any]) -> int:
        sets = [sql.SQL("{} = {}").format(sql.Identifier(k), sql.Placeholder()) for k in datos.keys()]
        q = sql.SQL("UPDATE {t} SET {sets} WHERE id = %s AND usuario_id = %s;").format(
            t=_tabla(tabla),
            sets=sql.SQL(", ").join(sets),
        )
        with self._cursor() as cur:
            cur.execute(q, list(datos.values()) + [id, usuario_id])
            return cur.rowcount

    def eliminar(self, tabla: str, id: int, usuario_id: int) -> int:
        q = sql.SQL("DELETE FROM {t} WHERE id = %s AND usuario_id = %s;").format(t=_tabla(tabla))
        with self._cursor() as cur:
            cur.execute(q, (id, usuario_id))
            return cur.rowcount

    def suma(self, tabla: str, campo: str, usuario_id: int, filtros: Optional[Dict[str, Any]] = None) -> Optional[Decimal]:
        """SUM(campo) de las filas del usuario; None si no hay filas."""
        filtros = filtros or {}
        where = [sql.SQL("usuario_id = %s")]
        where += [sql.SQL("{} = %s").format(sql.Identifier(k)) for k in filtros.keys()]
        q = sql.SQL("SELECT SUM({c}) AS total FROM {t} WHERE {w};").format(
            c=sql.Identifier(campo),
            t=_tabla(tabla),
            w=sql.SQL(" AND ").join(where),
        )
        with self._cursor() as cur:
            cur.execute(q, [usuario_id] + list(filtros.values()))
            return cur.fetchone()["total"]

    # --------------------------------- Gastos ---------------------------------
    def gastos_entre(self, usuario_id: int, inicio: datetime, fin: datetime) -> List[Dict[str, Any]]:
        with self._cursor() as cur:
            cur.execute("""
                SELECT * FROM gastos
                WHERE usuario_id = %s AND fecha BETWEEN %s AND %s
                ORDER BY fecha DESC, id DESC;
            """, (usuario_id, inicio, fin))
            return [dict(r) for r in cur.fetchall()]

    def gastos_de_categoria(self, usuario_id: int, categoria: str) -> List[Dict[str, Any]]:
        with self._cursor() as cur:
            cur.execute("""
                SELECT * FROM gastos
                WHERE usuario_id = %s AND categoria = %s
                ORDER BY fecha DESC, id DESC;
            """, (usuario_id, categoria))
            return [dict(r) for r in cur.fetchall()]

    def suma_gastos(self, usuario_id: int, inicio: Optional[datetime] = None,
                    fin: Optional[datetime] = None, categoria: Optional[str] = None) -> Optional[Decimal]:
        where, params = ["usuario_id = %s"], [usuario_id]
        if inicio is not None and fin is not None:
            where.append("fecha BETWEEN %s AND %s"); params += [inicio, fin]
        if categoria is not None:
            where.append("categoria = %s"); params.append(categoria)
        with self._cursor() as cur:
            cur.execute(f"SELECT SUM(valor) AS total FROM gastos WHERE {' AND '.join(where)};", params)
            return cur.fetchone()["total"]

    def suma_por_categoria(self, usuario_id: int, inicio: datetime, fin: datetime) -> List[Dict[str, Any]]:
        with self._cursor() as cur:
            cur.execute("""
                SELECT categoria, SUM(valor) AS total
                FROM gastos
                WHERE usuario_id = %s AND fecha BETWEEN %s AND %s
                GROUP BY categoria
                ORDER BY categoria ASC;
            """, (usuario_id, inicio, fin))
            return [dict(r) for r in cur.fetchall()]

    # --------------------------------- Ahorro ---------------------------------
    def obtener_ahorro(self, usuario_id: int) -> Optional[Dict[str, Any]]:
        with self._cursor() as cur:
            cur.execute("SELECT * FROM ahorros WHERE usuario_id = %s;", (usuario_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def guardar_ahorro(self, usuario_id: int, valor_actual: Decimal, valor_meta: Decimal, fecha: date) -> Dict[str, Any]:
        with self._cursor() as cur:
            cur.execute("""
                INSERT INTO ahorros (usuario_id, valor_actual, valor_meta, fecha_actualizacion)
                VALUES (%s, %s, %s, %s)
                ON CONFLICT (usuario_id) DO UPDATE SET
                    valor_actual = EXCLUDED.valor_actual,
                    valor_meta = EXCLUDED.valor_meta,
                    fecha_actualizacion = EXCLUDED.fecha_actualizacion
                RETURNING *;
            """, (usuario_id, valor_actual, valor_meta, fecha))
            return dict(cur.fetchone())

    def sumar_ahorro(self, usuario_id: int, valor: Decimal, fecha: date) -> Dict[str, Any]:
        with self._cursor() as cur:
            cur.execute("""
                INSERT INTO ahorros (usuario_id, valor_actual, valor_meta, fecha_actualizacion)
                VALUES (%s, %s, 0, %s)
                ON CONFLICT (usuario_id) DO UPDATE SET
                    valor_actual = ahorros.valor_actual + EXCLUDED.valor_actual,
                    fecha_actualizacion = EXCLUDED.fecha_actualizacion
                RETURNING *;
            """, (usuario_id, valor, fecha))
            return dict(cur.fetchone())

    def restar_ahorro(self, usuario_id: int, valor: Decimal, fecha: date) -> Optional[Dict[str, Any]]:
        """Resta con piso en cero; None si el usuario no tiene ahorro."""
        with self._cursor() as cur:
            cur.execute("""
                UPDATE ahorros
                SET valor_actual = GREATEST(valor_actual - %s, 0),
                    fecha_actualizacion = %s
                WHERE usuario_id = %s
                RETURNING *;
            """, (valor, fecha, usuario_id))
            row = cur.fetchone()
            return dict(row) if row else None
