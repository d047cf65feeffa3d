def test_create_and_get_vaga(client, vaga_payload):
    r = client.post("/api/vagas", json=vaga_payload)
    assert r.status_code == 201, r.text
    vaga = r.json()["vaga"]
    assert vaga["id"]
    assert vaga["empresa"] == "Acme"
    assert vaga["createdAt"] and vaga["updatedAt"]

    r = client.get(f"/api/vagas/{vaga['id']}")
    assert r.status_code == 200
    assert r.json()["vaga"]["titulo"] == vaga_payload["titulo"]


def test_curso_is_optional(client, vaga_payload):
    del vaga_payload["curso"]
    r = client.post("/api/vagas", json=vaga_payload)
    assert r.status_code == 201
    assert r.json()["vaga"]["curso"] is None


def test_numeric_salary_is_accepted(client, vaga_payload):
    vaga_payload["salario"] = 4500
    r = client.post("/api/vagas", json=vaga_payload)
    assert r.status_code == 201
    assert r.json()["vaga"]["salario"] == 4500


def test_missing_required_field_is_400(client, vaga_payload):
    del vaga_payload["empresa"]
    vaga_payload["tipo_contrato"] = ""
    r = client.post("/api/vagas", json=vaga_payload)
    assert r.status_code == 400
    error = r.json()["error"]
    assert "empresa" in error and "tipo_contrato" in error


def test_list_vagas(client, vaga_payload):
    client.post("/api/vagas", json=vaga_payload)
    client.post("/api/vagas", json=dict(vaga_payload, titulo="Analista de Dados"))
    r = client.get("/api/vagas")
    assert r.status_code == 200
    assert sorted(v["titulo"] for v in r.json()["vagas"]) == ["Analista de Dados", "Desenvolvedor Python"]


def test_partial_update(client, vaga):
    r = client.put(f"/api/vagas/{vaga['id']}", json={"salario": "R$ 6000", "curso": None})
    assert r.status_code == 200, r.text
    updated = r.json()["vaga"]
    assert updated["salario"] == "R$ 6000"
    assert updated["curso"] is None
    assert updated["titulo"] == vaga["titulo"]
    assert updated["createdAt"] == vaga["createdAt"]


def test_update_cannot_blank_required_field(client, vaga):
    r = client.put(f"/api/vagas/{vaga['id']}", json={"titulo": ""})
    assert r.status_code == 400


def test_missing_vaga_is_404(client):
    assert client.get("/api/vagas/nope").status_code == 404
    assert client.put("/api/vagas/nope", json={"titulo": "X"}).status_code == 404
    r = client.delete("/api/vagas/nope")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Vaga não encontrada"}


def test_delete_vaga(client, vaga):
    r = client.delete(f"/api/vagas/{vaga['id']}")
    assert r.status_code == 200
    assert client.get(f"/api/vagas/{vaga['id']}").status_code == 404
