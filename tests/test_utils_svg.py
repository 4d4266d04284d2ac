from __future__ import annotations

from datetime import date

from placement.contraintes.binaires import NeDoiventPasEtreVoisins
from placement.modele.eleve import Eleve
from placement.modele.grille import Grille
from placement.modele.plan import Plan
from placement.modele.position import Position
from placement.modele.types import Genre, ModeGenre, PreferenceRang
from placement.utils_svg import lignes_resume, svg_depuis_plan


def _plan() -> Plan:
    eleves = (
        Eleve("Jean", "Martin", Genre.MASCULIN, identifiant="a"),
        Eleve("Anne", "Durand", Genre.FEMININ, identifiant="b"),
        Eleve("Léa", "<Script>", Genre.FEMININ, identifiant="c"),
    )
    return Plan(
        nom_classe="5e B & co",
        eleves=eleves,
        contraintes=(NeDoiventPasEtreVoisins("a", "b"),),
        preferences_rang={"c": PreferenceRang.DEVANT},
        mode_genre=ModeGenre.DIFFERENT,
        epingles={"c": Position(1, 0)},
        grille=Grille.depuis_matrice([["a", "b", None, None], ["c", None, None, None]]),
    )


def test_resume_lisible():
    lignes = lignes_resume(_plan())
    assert lignes[0] == "Binômes : genres différents"
    assert "Martin Jean et Durand Anne ne doivent pas être voisins (non respectée)" in lignes
    assert "<Script> Léa : devant" in lignes
    assert any("placé à la main (rang 2, place 1)" in ligne for ligne in lignes)


def test_svg_autonome_et_echappe():
    svg = svg_depuis_plan(_plan(), jour=date(2024, 9, 2))
    assert svg.startswith("<svg") and svg.endswith("</svg>")
    assert "5e B &amp; co" in svg
    assert "&lt;Script&gt;" in svg and "<Script>" not in svg
    assert "02/09/2024" in svg
    assert "Élèves (3)" in svg
    # élève épinglé en gras
    assert 'font-weight="700">&lt;Script&gt;, L.</text>' in svg


def test_svg_plan_vide():
    svg = svg_depuis_plan(Plan(), jour=date(2024, 1, 1))
    assert "Plan de classe" in svg
    assert "Élèves (0)" in svg


def test_resume_detaille_le_score():
    # c au fond malgré sa préférence (-50), a et b voisins malgré le ban (2 x -1000),
    # binôme mixte en mode "genres différents" (2 x +10)
    assert lignes_resume(_plan())[-1] == "Score : -2030 (rangs -50, binômes -2000, genre +20)"
