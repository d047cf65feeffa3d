import os
import pytest
from fastapi.testclient import TestClient

# Keep bcrypt cheap and the store in-process for the whole test session
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STORE_BACKEND", "memory")

from jobboard.database import get_store
from jobboard.main import app
from jobboard.memory import InMemoryStore


VAGA = {
    "titulo": "Desenvolvedor Python",
    "empresa": "Acme",
    "descricao": "APIs com FastAPI",
    "requisitos": "Python, SQL",
    "salario": "R$ 5000",
    "localizacao": "Remoto",
    "tipo_contrato": "CLT",
    "curso": "Ciência da Computação",
}


@pytest.fixture()
def store():
    return InMemoryStore()


@pytest.fixture()
def client(store):
    # Override the dependency to use the test store
    def override_get_store():
        return store

    app.dependency_overrides[get_store] = override_get_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def vaga_payload():
    return dict(VAGA)


@pytest.fixture()
def user(client):
    r = client.post("/api/users", json={
        "name": "Ana", "email": "a@x.com", "course": "CS", "password": "pw1",
    })
    assert r.status_code == 201, r.text
    return r.json()["user"]


@pytest.fixture()
def vaga(client, vaga_payload):
    r = client.post("/api/vagas", json=vaga_payload)
    assert r.status_code == 201, r.text
    return r.json()["vaga"]
