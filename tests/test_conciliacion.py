from decimal import Decimal

import pytest

from finanzas.core.conciliacion import Conciliador
from finanzas.core.errores import ErrorValidacion
from finanzas.core.recurrentes import CUENTAS_FIJAS, INGRESOS

from conftest import USUARIO


def _cuenta(store, descripcion, dia=5, valor="100", usuario_id=USUARIO):
    return store.insertar("cuentas_fijas", {
        "usuario_id": usuario_id, "descripcion": descripcion, "valor_total": Decimal(valor),
        "dia_vencimiento": dia, "categoria": "tarjeta", "estado": "activo"})


def test_crea_actualiza_y_elimina(store):
    _cuenta(store, "luz")
    _cuenta(store, "agua")
    enviados = [
        {"id": 1, "descripcion": "luz nueva", "valor_total": "150,00", "dia_vencimiento": 10},
        {"descripcion": "internet", "valor_total": 80, "dia_vencimiento": 20, "categoria": "servicios"},
    ]
    res = Conciliador(store, CUENTAS_FIJAS).conciliar(USUARIO, enviados)

    assert res.actualizados == [1]
    assert res.creados == [3]
    assert res.eliminados == [2]
    assert res.completo
    filas = {r["id"]: r for r in store.tablas["cuentas_fijas"]}
    assert set(filas) == {1, 3}
    assert filas[1]["descripcion"] == "luz nueva"
    assert filas[1]["valor_total"] == Decimal("150.00")
    assert filas[1]["dia_vencimiento"] == 10
    assert filas[3]["categoria"] == "servicios"
    assert filas[3]["usuario_id"] == USUARIO


def test_no_toca_filas_de_otro_usuario(store):
    _cuenta(store, "ajena", usuario_id=2)
    res = Conciliador(store, CUENTAS_FIJAS).conciliar(USUARIO, [])
    assert res.eliminados == []
    assert len(store.tablas["cuentas_fijas"]) == 1


def test_id_desconocido_queda_como_fallido(store):
    _cuenta(store, "ajena", usuario_id=2)
    enviados = [{"id": 1, "descripcion": "robo", "valor_total": 1, "dia_vencimiento": 1}]
    res = Conciliador(store, CUENTAS_FIJAS).conciliar(USUARIO, enviados)
    assert res.actualizados == []
    assert res.fallidos[0]["id"] == 1
    assert store.tablas["cuentas_fijas"][0]["descripcion"] == "ajena"


def test_fallos_no_detienen_el_resto(store):
    for d in ("a", "b", "c", "d"):
        _cuenta(store, d)
    store.fallos = {"actualizar": {1}, "eliminar": {3}}
    enviados = [
        {"id": 1, "descripcion": "a2", "valor_total": 1, "dia_vencimiento": 5},
        {"id": 2, "descripcion": "b2", "valor_total": 2, "dia_vencimiento": 5},
        {"descripcion": "e", "valor_total": 3, "dia_vencimiento": 5},
    ]
    res = Conciliador(store, CUENTAS_FIJAS).conciliar(USUARIO, enviados)

    assert res.actualizados == [2]
    assert res.creados == [5]
    assert res.eliminados == [4]
    assert {(f["id"], f["operacion"]) for f in res.fallidos} == {(1, "actualizar"), (3, "eliminar")}
    assert not res.completo


def test_fila_ya_borrada_queda_como_fallida(store):
    _cuenta(store, "luz")
    store.eliminar = lambda tabla, id, usuario_id: 0
    res = Conciliador(store, CUENTAS_FIJAS).conciliar(USUARIO, [])
    assert res.eliminados == []
    assert res.fallidos == [{"id": 1, "operacion": "eliminar", "error": "Cuenta fija no encontrada."}]
    assert not res.completo


def test_item_invalido_no_escribe_nada(store):
    _cuenta(store, "luz")
    enviados = [
        {"descripcion": "nueva", "valor_total": 10, "dia_vencimiento": 5},
        {"id": 1, "descripcion": "luz", "valor_total": 10, "dia_vencimiento": 32},
    ]
    with pytest.raises(ErrorValidacion) as e:
        Conciliador(store, CUENTAS_FIJAS).conciliar(USUARIO, enviados)
    assert "Item 2" in e.value.mensaje
    assert [r["descripcion"] for r in store.tablas["cuentas_fijas"]] == ["luz"]


def test_mismo_algoritmo_para_ingresos(store):
    store.insertar("ingresos", {"usuario_id": USUARIO, "descripcion": "sueldo", "valor": Decimal("3000"),
                                "dia_recibo": 5, "tipo": "salario", "recurrencia": "mensual"})
    enviados = [{"descripcion": "bono", "valor": "500", "dia_recibo": 20, "tipo": "beneficio"}]
    res = Conciliador(store, INGRESOS).conciliar(USUARIO, enviados)
    assert res.creados == [2] and res.eliminados == [1]
    assert store.tablas["ingresos"][0]["recurrencia"] == "mensual"
