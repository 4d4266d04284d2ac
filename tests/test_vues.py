import json

import pytest
from django.test import Client

from placement.editions import definir_eleves, nouveau_plan
from placement.modele.eleve import Eleve
from placement.modele.types import Genre
from placement.persistance import plan_vers_dict
from placement.tasks import t_appliquer_edition


@pytest.fixture(autouse=True)
def _force_celery_eager(settings, monkeypatch):
    # Celery 5 names
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True
    settings.CELERY_TASK_STORE_EAGER_RESULT = True

    # In-memory broker & result backend for tests
    settings.CELERY_BROKER_URL = "memory://"
    settings.CELERY_RESULT_BACKEND = "cache+memory://"

    # The Celery app read its configuration at startup and caches its result
    # backend per thread: update the conf, then drop the cached backend
    from siteplacement.celery import app
    app.conf.update(
        task_always_eager=True,
        task_eager_propagates=True,
        task_store_eager_result=True,
        broker_url="memory://",
        result_backend="cache+memory://",
    )
    app._local.__dict__.pop("backend", None)
    # Tasks copy task_store_eager_result when they are bound: propagate it
    for task in app.tasks.values():
        monkeypatch.setattr(task, "store_eager_result", True)
    yield
    app._local.__dict__.pop("backend", None)


@pytest.fixture(autouse=True)
def _cache_locmem(settings):
    settings.CACHES = {"default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}}


def _plan_dict(n: int = 6) -> dict:
    eleves = [Eleve(f"P{i}", f"NOM{i}", Genre.MASCULIN, identifiant=f"e{i}") for i in range(n)]
    return plan_vers_dict(definir_eleves(nouveau_plan(), eleves, seed=0))


def _post_json(client: Client, url: str, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


def _post_start(client: Client, payload: dict) -> str:
    r = _post_json(client, "/placement/edit/start", payload)
    assert r.status_code == 200, r.content
    task_id = r.json()["task_id"]
    assert isinstance(task_id, str)
    return task_id


def _get_status(client: Client, task_id: str, channel: str = "") -> dict:
    url = f"/placement/edit/status/{task_id}"
    if channel:
        url += f"?channel={channel}"
    r = client.get(url)
    assert r.status_code == 200
    return r.json()


def test_import_csv_texte_brut(client):
    r = client.post("/placement/import", data="Smith, John,M\nLee, Ann,X\n", content_type="text/csv")
    assert r.status_code == 200
    data = r.json()
    assert [(s["firstName"], s["lastName"], s["gender"]) for s in data["students"]] == [("John", "Smith", "M")]
    assert len(data["errors"]) == 1 and data["errors"][0].startswith("Ligne 2 ")


def test_import_csv_json(client):
    r = _post_json(client, "/placement/import", {"csv": "Name,Gender\nAlice Dupont,F"})
    assert r.json()["students"][0]["firstName"] == "Alice"


def test_import_refuse_get(client):
    assert client.get("/placement/import").status_code == 405


def test_charger_plan(client):
    r = _post_json(client, "/placement/load", _plan_dict())
    assert r.status_code == 200
    assert r.json()["plan"]["gridCols"] == 4

    r = _post_json(client, "/placement/load", {"students": "x", "constraints": [], "grid": []})
    assert r.status_code == 400
    assert "students" in r.json()["error"]


def test_edition_bout_en_bout(client):
    payload = {
        "plan": _plan_dict(),
        "edit": {"type": "add_constraint", "constraint": {"type": "ban", "studentIds": ["e0", "e1"]}},
        "seed": 5,
    }
    data = _get_status(client, _post_start(client, payload))
    assert data["status"] == "SUCCESS", data
    assert data["plan"]["constraints"] == [{"type": "ban", "studentIds": ["e0", "e1"]}]
    assert data["score"] > -1000
    assert data["superseded"] is False


def test_edition_invalide(client):
    payload = {"plan": _plan_dict(), "edit": {"type": "move_student", "studentId": "zz", "toRow": 0, "toCol": 0}}
    data = _get_status(client, _post_start(client, payload))
    assert data["status"] == "FAILURE"
    assert "zz" in data["error"]


def test_edition_sans_edit(client):
    r = _post_json(client, "/placement/edit/start", {"plan": _plan_dict()})
    assert r.status_code == 400


def test_seule_la_derniere_requete_du_canal_compte(client):
    base = {"plan": _plan_dict(), "channel": "salle-12", "seed": 1}
    premier = _post_start(client, {**base, "edit": {"type": "set_gender_mode", "mode": "same"}})
    second = _post_start(client, {**base, "edit": {"type": "set_gender_mode", "mode": "different"}})

    assert _get_status(client, premier, channel="salle-12")["superseded"] is True
    dernier = _get_status(client, second, channel="salle-12")
    assert dernier["superseded"] is False
    assert dernier["plan"]["genderMode"] == "different"


def test_export_et_telechargement(client):
    plan = _plan_dict()
    plan["className"] = "5e B / Salle 12"
    r = _post_json(client, "/placement/export", plan)
    assert r.status_code == 200
    urls = r.json()["download"]
    assert {"svg", "json"} <= set(urls)

    svg = client.get(urls["svg"])
    assert svg.status_code == 200
    assert svg["Content-Type"] == "image/svg+xml"
    assert "5e-B-Salle-12" in svg["Content-Disposition"]
    assert svg.content.startswith(b"<svg")

    js = client.get(urls["json"])
    assert json.loads(js.content)["className"] == "5e B / Salle 12"


def test_telechargement_expire(client):
    assert client.get("/placement/download/inconnu/svg").status_code == 404


def test_tache_directe():
    res = t_appliquer_edition({"edit": {"type": "set_class_name", "className": "CM2"}})
    assert res["status"] == "SUCCESS"
    assert res["plan"]["className"] == "CM2"
    assert res["score"] == 0


def test_resultats_celery_en_memoire():
    from celery.backends.cache import CacheBackend
    from celery.result import AsyncResult
    from siteplacement.celery import app

    assert isinstance(app.backend, CacheBackend)
    res = t_appliquer_edition.delay({"edit": {"type": "clear_all"}})
    assert AsyncResult(res.id).state == "SUCCESS"
