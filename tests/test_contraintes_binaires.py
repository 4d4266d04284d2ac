from __future__ import annotations

import pytest

from placement.contraintes.binaires import DevraientEtreVoisins, NeDoiventPasEtreVoisins
from placement.contraintes.registre import ContexteFabrique, contrainte_depuis_code, fabrique_de
from placement.contraintes.types import TypeContrainte
from placement.contraintes import enregistrement  # noqa: F401
from placement.modele.eleve import Eleve
from placement.modele.grille import Grille
from placement.modele.types import Genre


def _index(*ids: str):
    return {i: Eleve(i.upper(), "", Genre.FEMININ, identifiant=i) for i in ids}


def test_ban_et_prefer_selon_la_table():
    ensemble = Grille.depuis_matrice([["a", "b", "c", None]])
    separes = Grille.depuis_matrice([["a", "c", "b", None]])

    assert NeDoiventPasEtreVoisins("a", "b").est_satisfaite(ensemble) is False
    assert NeDoiventPasEtreVoisins("a", "b").est_satisfaite(separes) is True
    assert DevraientEtreVoisins("a", "b").est_satisfaite(ensemble) is True
    assert DevraientEtreVoisins("a", "b").est_satisfaite(separes) is False


def test_colonnes_adjacentes_de_tables_differentes_ne_sont_pas_voisines():
    g = Grille.depuis_matrice([[None, "a", "b", None]])
    assert DevraientEtreVoisins("a", "b").est_satisfaite(g) is False


def test_paire_non_ordonnee():
    c1, c2 = NeDoiventPasEtreVoisins("a", "b"), NeDoiventPasEtreVoisins("b", "a")
    assert c1 == c2 and hash(c1) == hash(c2)
    assert c1.concerne("b", "a")
    assert c1 != DevraientEtreVoisins("a", "b")
    assert c1.cle() == DevraientEtreVoisins("a", "b").cle()


def test_paire_reflexive_refusee():
    with pytest.raises(ValueError):
        DevraientEtreVoisins("a", "a")


def test_fabrique_depuis_code():
    ctx = ContexteFabrique(index_eleves=_index("a", "b"))
    c = contrainte_depuis_code({"type": "ban", "studentIds": ["a", "b"]}, ctx)
    assert isinstance(c, NeDoiventPasEtreVoisins)
    assert contrainte_depuis_code(c.code_machine(), ctx) == c
    assert contrainte_depuis_code({"type": "prefer", "a": "b", "b": "a"}, ctx) == DevraientEtreVoisins("a", "b")


def test_fabrique_refuse_type_ou_eleve_inconnu():
    ctx = ContexteFabrique(index_eleves=_index("a", "b"))
    with pytest.raises(ValueError):
        contrainte_depuis_code({"type": "far_apart", "studentIds": ["a", "b"]}, ctx)
    with pytest.raises(KeyError):
        contrainte_depuis_code({"type": "ban", "studentIds": ["a", "zz"]}, ctx)
    # "manual" n'a plus de fabrique : seul le chargement des anciens fichiers le lit
    assert fabrique_de(TypeContrainte.MANUEL) is None
    with pytest.raises(KeyError):
        contrainte_depuis_code({"type": "manual", "studentIds": ["a", "a"]}, ctx)


def test_texte_humain():
    noms = {"a": "Martin Jean", "b": "Durand Anne"}
    assert NeDoiventPasEtreVoisins("a", "b").texte_humain(noms) == "Martin Jean et Durand Anne ne doivent pas être voisins"
