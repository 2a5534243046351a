"""
Endpoints /planificacion con TestClient.

Las fechas en 2099 mantienen las actividades en PENDIENTE sin depender del reloj.
"""
import json

import pytest

from utils.security import create_access_token

BASE = "/planificacion"


def _payload(**overrides):
    data = {
        "nombre": "Siembra de maíz",
        "descripcion": "Siembra mecanizada en surcos",
        "tipo": "SIEMBRA",
        "prioridad": "ALTA",
        "fecha_inicio_planificada": "2099-03-01T07:00:00",
        "fecha_fin_planificada": "2099-03-05T17:00:00",
        "duracion_estimada_horas": 16,
        "periodo": "SEMANA",
    }
    data.update(overrides)
    return data


@pytest.fixture
def actividad_creada(client, auth_headers, catalogo):
    resp = client.post(
        f"{BASE}/",
        json=_payload(lote_id=catalogo["lote_id"], trabajadores_asignados=catalogo["trabajador_ids"][:2]),
        headers=auth_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.parametrize("method, path", [
    ("get", f"{BASE}/"),
    ("get", f"{BASE}/1"),
    ("get", f"{BASE}/lote/1"),
    ("get", f"{BASE}/estadisticas"),
    ("put", f"{BASE}/1"),
    ("put", f"{BASE}/1/progreso"),
    ("delete", f"{BASE}/1"),
])
def test_rutas_protegidas_sin_token(client, method, path):
    kwargs = {"json": {}} if method == "put" else {}
    resp = getattr(client, method)(path, **kwargs)
    assert resp.status_code == 401


def test_token_invalido_rechazado(client):
    resp = client.get(f"{BASE}/", headers={"Authorization": "Bearer no-es-un-jwt"})
    assert resp.status_code == 401


def test_crear_sin_token_deja_creado_por_nulo(client):
    resp = client.post(f"{BASE}/", json=_payload())

    assert resp.status_code == 201
    body = resp.json()
    assert body["creado_por"] is None
    assert body["estado"] == "PENDIENTE"


def test_crear_con_token_registra_usuario(client, actividad_creada, catalogo):
    assert actividad_creada["creado_por"] == catalogo["usuario_id"]
    assert actividad_creada["lote_nombre"] == "Lote La Loma"
    assert actividad_creada["trabajadores_asignados"] == catalogo["trabajador_ids"][:2]
    assert [a["horas_planificadas"] for a in actividad_creada["asignaciones"]] == [8.0, 8.0]


def test_crear_sin_nombre_responde_400(client, auth_headers):
    payload = _payload()
    payload.pop("nombre")

    resp = client.post(f"{BASE}/", json=payload, headers=auth_headers)

    assert resp.status_code == 400
    assert "nombre" in resp.json()["message"]


def test_crear_con_fechas_invertidas_responde_400(client, auth_headers):
    resp = client.post(
        f"{BASE}/",
        json=_payload(fecha_fin_planificada="2099-02-01T00:00:00"),
        headers=auth_headers,
    )
    assert resp.status_code == 400


@pytest.mark.parametrize("literal", ["NaN", "Infinity"])
def test_crear_con_duracion_no_finita_responde_400(client, auth_headers, literal):
    cuerpo = json.dumps(_payload()).replace('"duracion_estimada_horas": 16', f'"duracion_estimada_horas": {literal}')

    resp = client.post(
        f"{BASE}/",
        content=cuerpo,
        headers={**auth_headers, "Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert "duración" in resp.json()["message"]


def test_crear_con_tipo_desconocido_responde_422(client, auth_headers):
    resp = client.post(f"{BASE}/", json=_payload(tipo="PODA_LUNAR"), headers=auth_headers)

    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_crear_con_trabajadores_duplicados_responde_422(client, auth_headers, catalogo):
    t1 = catalogo["trabajador_ids"][0]
    resp = client.post(f"{BASE}/", json=_payload(trabajadores_asignados=[t1, t1]), headers=auth_headers)
    assert resp.status_code == 422


def test_obtener_inexistente_responde_404(client, auth_headers):
    resp = client.get(f"{BASE}/9999", headers=auth_headers)

    assert resp.status_code == 404
    assert resp.json() == {"message": "Actividad no encontrada"}


def test_listar_y_filtrar_por_lote(client, auth_headers, actividad_creada, catalogo):
    client.post(f"{BASE}/", json=_payload(nombre="Sin lote"), headers=auth_headers)

    todas = client.get(f"{BASE}/", headers=auth_headers).json()
    del_lote = client.get(f"{BASE}/lote/{catalogo['lote_id']}", headers=auth_headers).json()

    assert len(todas) == 2
    assert [a["id"] for a in del_lote] == [actividad_creada["id"]]


def test_actualizar_parcial(client, auth_headers, actividad_creada):
    resp = client.put(
        f"{BASE}/{actividad_creada['id']}",
        json={"prioridad": "URGENTE", "notas": "Revisar semilla"},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["prioridad"] == "URGENTE"
    assert body["notas"] == "Revisar semilla"
    assert body["nombre"] == actividad_creada["nombre"]


def test_actualizar_progreso_invalido_responde_400(client, auth_headers, actividad_creada):
    resp = client.put(
        f"{BASE}/{actividad_creada['id']}",
        json={"progreso_porcentaje": 150},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_registrar_progreso_completo(client, auth_headers, actividad_creada):
    resp = client.put(
        f"{BASE}/{actividad_creada['id']}/progreso",
        json={"progreso_porcentaje": 100, "duracion_real_horas": 14.5},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["estado"] == "COMPLETADA"
    assert body["duracion_real_horas"] == 14.5


def test_registrar_progreso_inexistente_responde_404(client, auth_headers):
    resp = client.put(f"{BASE}/4242/progreso", json={"progreso_porcentaje": 10}, headers=auth_headers)
    assert resp.status_code == 404


def test_eliminar(client, auth_headers, actividad_creada):
    resp = client.delete(f"{BASE}/{actividad_creada['id']}", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Actividad eliminada correctamente"}
    assert client.get(f"{BASE}/{actividad_creada['id']}", headers=auth_headers).status_code == 404


def test_eliminar_inexistente_responde_404(client, auth_headers):
    assert client.delete(f"{BASE}/31337", headers=auth_headers).status_code == 404


def test_estadisticas(client, auth_headers, actividad_creada):
    client.put(
        f"{BASE}/{actividad_creada['id']}/progreso",
        json={"progreso_porcentaje": 100},
        headers=auth_headers,
    )
    client.post(f"{BASE}/", json=_payload(nombre="Otra"), headers=auth_headers)

    resp = client.get(f"{BASE}/estadisticas", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json() == {
        "total_actividades": 2,
        "pendientes": 1,
        "en_progreso": 0,
        "completadas": 1,
        "atrasadas": 0,
        "canceladas": 0,
        "progreso_promedio": 50.0,
        "requieren_atencion": 0,
    }


def test_usuario_inactivo_rechazado(client, db, catalogo):
    from models import Usuario

    usuario = db.get(Usuario, catalogo["usuario_id"])
    usuario.activo = False
    db.commit()

    headers = {"Authorization": f"Bearer {create_access_token(catalogo['usuario_id'])}"}
    assert client.get(f"{BASE}/", headers=headers).status_code == 401
