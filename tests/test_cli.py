from __future__ import annotations

import json

from placement.__main__ import main
from placement.exemples import construire_exemple
from placement.persistance import plan_vers_json


def test_importer_vers_fichier(tmp_path, capsys):
    src = tmp_path / "classe.csv"
    src.write_text("Name,Gender\nMartin, Paul,M\nDurand Anne,Q\n", encoding="utf-8")
    sortie = tmp_path / "eleves.json"

    assert main(["importer", str(src), "--sortie", str(sortie)]) == 0
    eleves = json.loads(sortie.read_text(encoding="utf-8"))
    assert [(e["firstName"], e["lastName"]) for e in eleves] == [("Paul", "Martin")]
    assert "Ligne 3 " in capsys.readouterr().err


def test_placer_plan_sauvegarde(tmp_path, capsys):
    chemin = tmp_path / "plan.json"
    chemin.write_text(plan_vers_json(construire_exemple()), encoding="utf-8")

    assert main(["placer", str(chemin), "--seed", "3"]) == 0
    out = capsys.readouterr().out
    assert '"className": "5e B"' in out


def test_placer_plan_invalide(tmp_path, capsys):
    chemin = tmp_path / "plan.json"
    chemin.write_text('{"students": 1}', encoding="utf-8")
    assert main(["placer", str(chemin)]) == 1
    assert "plan invalide" in capsys.readouterr().err


def test_exemple_reproductible(capsys):
    a, b = construire_exemple(), construire_exemple()
    assert a.grille == b.grille
    assert main(["exemple"]) == 0
    assert "=== 5e B" in capsys.readouterr().out
