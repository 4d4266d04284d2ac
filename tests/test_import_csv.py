from __future__ import annotations

from placement.import_csv import decouper_nom, parser_csv
from placement.modele.types import Genre


def _noms(resultat):
    return [(e.prenom(), e.nom(), e.genre()) for e in resultat.eleves]


def test_nom_virgule_prenom_sans_entete():
    r = parser_csv("Smith, John,M\nDoe,Jane,F")
    assert r.erreurs == []
    assert _noms(r) == [("John", "Smith", Genre.MASCULIN), ("Jane", "Doe", Genre.FEMININ)]


def test_genre_invalide_signale_la_ligne():
    r = parser_csv("Lee, Ann,X")
    assert r.eleves == []
    assert len(r.erreurs) == 1
    assert r.erreurs[0].startswith("Ligne 1 ")
    assert "'X'" in r.erreurs[0]


def test_entete_ignoree_et_numeros_physiques():
    texte = "Name,Gender\n\"Martin, Paul\",male\n\nAlice Dupont,FEMALE\nBob,Z\nCharlie,other\n"
    r = parser_csv(texte)
    assert _noms(r) == [
        ("Paul", "Martin", Genre.MASCULIN),
        ("Alice", "Dupont", Genre.FEMININ),
        ("Charlie", "", Genre.AUTRE),
    ]
    assert len(r.erreurs) == 1 and r.erreurs[0].startswith("Ligne 5 ")


def test_colonnes_manquantes():
    r = parser_csv("Jean Martin\nAnne Durand,F")
    assert len(r.eleves) == 1
    assert r.erreurs[0].startswith("Ligne 1 ")


def test_fichier_vide():
    assert parser_csv("").erreurs == ["Fichier vide"]
    assert parser_csv("\n  \n").eleves == []


def test_identifiants_distincts():
    r = parser_csv("Jean Martin,M\nJean Martin,M")
    assert len({e.id() for e in r.eleves}) == 2


def test_decouper_nom():
    assert decouper_nom("Martin, Paul") == ("Paul", "Martin")
    assert decouper_nom("Jean de La Fontaine") == ("Jean", "de La Fontaine")
    assert decouper_nom("Zoé") == ("Zoé", "")
    assert decouper_nom("   ") is None
