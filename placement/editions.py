"""
Éditions du plan de classe.

Chaque édition est une transformation pure `(Plan, arguments) -> Plan`. Toutes
relancent le moteur de placement sur le plan obtenu, sauf :

- `definir_nom_classe` (sans effet sur les places),
- `deplacer_eleve` (modifie la grille directement et épingle l'élève),
- `charger_plan` / `tout_effacer` (remplacent l'agrégat).

`appliquer_edition` reçoit une édition sous forme de dict JSON
(`{"type": "add_constraint", ...}`) et l'aiguille via un registre, sur le même
modèle que les fabriques de contraintes.
"""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from .contraintes.base import ContraintePaire
from .contraintes.registre import ContexteFabrique, contrainte_depuis_code
from .contraintes import enregistrement  # noqa: F401  (remplit le registre des contraintes)
from .modele.eleve import Eleve
from .modele.grille import Grille
from .modele.plan import Plan
from .modele.position import Position
from .modele.types import ModeGenre, PreferenceRang
from .persistance import plan_depuis_dict
from .solveurs.recherche_locale import generer_placement

logger = logging.getLogger(__name__)

COLONNES_MIN: int = 4
COLONNES_MAX: int = 6


# --------------------------------------------------------------------------- helpers

def taille_grille(nb_eleves: int) -> Tuple[int, int]:
    """Dimensions par défaut : 4 à 6 colonnes (paires), grille à peu près carrée.

    Retourne `(rangs, colonnes)` ; `(0, 0)` pour une classe vide.
    """
    if nb_eleves <= 0:
        return 0, 0
    cible: int = min(COLONNES_MAX, max(COLONNES_MIN, math.ceil(math.sqrt(nb_eleves))))
    colonnes: int = cible if cible % 2 == 0 else cible + 1
    rangs: int = math.ceil(nb_eleves / colonnes)
    return rangs, colonnes


def _regenerer(plan: Plan, seed: Optional[int]) -> Plan:
    """Recalcule entièrement la grille du plan."""
    return replace(plan, grille=generer_placement(plan, seed=seed))


def _verifier_eleve(plan: Plan, identifiant: str) -> None:
    if plan.eleve(identifiant) is None:
        raise ValueError(f"élève inconnu: {identifiant!r}")


# --------------------------------------------------------------------------- éditions

def nouveau_plan() -> Plan:
    """Plan vide (état initial et résultat de `tout_effacer`)."""
    return Plan()


def definir_nom_classe(plan: Plan, nom_classe: str) -> Plan:
    return replace(plan, nom_classe=nom_classe.strip())


def definir_eleves(plan: Plan, eleves: Sequence[Eleve], *, seed: Optional[int] = None) -> Plan:
    """Remplace la liste d'élèves.

    Contraintes, préférences de rang et épingles sont effacées (elles
    désigneraient des identifiants disparus) ; la grille est redimensionnée.
    """
    ids = [e.id() for e in eleves]
    if len(set(ids)) != len(ids):
        raise ValueError("identifiants d'élèves en double")
    rangs, colonnes = taille_grille(len(eleves))
    nouveau = replace(
        plan,
        eleves=tuple(eleves),
        contraintes=(),
        preferences_rang={},
        epingles={},
        grille=Grille.vide(rangs, colonnes),
    )
    return _regenerer(nouveau, seed)


def ajouter_contrainte(plan: Plan, contrainte: ContraintePaire, *, seed: Optional[int] = None) -> Plan:
    """Ajoute (ou remplace) la contrainte de la paire, puis relance le placement."""
    a, b = contrainte.implique()
    _verifier_eleve(plan, a)
    _verifier_eleve(plan, b)
    restantes = tuple(c for c in plan.contraintes if c.cle() != contrainte.cle())
    if len(restantes) != len(plan.contraintes):
        logger.debug("contrainte remplacée pour la paire %s/%s", a, b)
    return _regenerer(replace(plan, contraintes=restantes + (contrainte,)), seed)


def retirer_contrainte(plan: Plan, a: str, b: str, *, seed: Optional[int] = None) -> Plan:
    """Retire la contrainte de la paire {a, b} ; renvoie le même plan si elle n'existe pas."""
    existante: Optional[ContraintePaire] = plan.contrainte_entre(a, b)
    if existante is None:
        return plan
    restantes = tuple(c for c in plan.contraintes if c is not existante)
    return _regenerer(replace(plan, contraintes=restantes), seed)


def definir_mode_genre(plan: Plan, mode: ModeGenre, *, seed: Optional[int] = None) -> Plan:
    return _regenerer(replace(plan, mode_genre=ModeGenre(mode)), seed)


def definir_preference_rang(
        plan: Plan,
        identifiant: str,
        preference: PreferenceRang,
        *,
        seed: Optional[int] = None,
) -> Plan:
    """Remplace la préférence de l'élève ; `none` la supprime."""
    _verifier_eleve(plan, identifiant)
    preferences: Dict[str, PreferenceRang] = {
        sid: p for sid, p in plan.preferences_rang.items() if sid != identifiant
    }
    preference = PreferenceRang(preference)
    if preference != PreferenceRang.AUCUNE:
        preferences[identifiant] = preference
    return _regenerer(replace(plan, preferences_rang=preferences), seed)


def definir_taille_grille(plan: Plan, nb_rangs: int, nb_colonnes: int, *, seed: Optional[int] = None) -> Plan:
    """Impose les dimensions de la grille ; les épingles hors grille sont abandonnées."""
    if nb_rangs < 0 or nb_colonnes < 0 or nb_colonnes % 2 != 0:
        raise ValueError(f"dimensions invalides {nb_rangs}x{nb_colonnes} (colonnes paires attendues)")
    grille = Grille.vide(nb_rangs, nb_colonnes)
    epingles = {sid: pos for sid, pos in plan.epingles.items() if grille.contient(pos)}
    for sid in set(plan.epingles) - set(epingles):
        logger.info("épingle de %r abandonnée (hors de la grille %dx%d)", sid, nb_rangs, nb_colonnes)
    return _regenerer(replace(plan, grille=grille, epingles=epingles), seed)


def deplacer_eleve(plan: Plan, identifiant: str, cible: Position) -> Plan:
    """Déplace un élève à la main et l'épingle sur sa nouvelle place.

    - L'occupant de la place cible prend l'ancienne place de l'élève ; s'il
      était épinglé, son épingle le suit.
    - Si l'élève n'avait pas de place, l'occupant déplacé va sur la première
      place libre (ligne par ligne) et perd son épingle ; sans place libre, il
      reste non placé.
    - Pas de recalcul : la grille reflète exactement le geste de l'utilisateur.
    """
    _verifier_eleve(plan, identifiant)
    grille: Grille = plan.grille.copie()
    if not grille.contient(cible):
        raise ValueError(f"place ({cible.rang}, {cible.colonne}) hors de la grille")

    epingles: Dict[str, Position] = dict(plan.epingles)
    origine: Optional[Position] = grille.position_de(identifiant)
    deplace: Optional[str] = grille.lire(cible)

    if origine is not None:
        grille.ecrire(origine, None)
    grille.ecrire(cible, identifiant)

    if deplace is not None and deplace != identifiant:
        if origine is not None:
            grille.ecrire(origine, deplace)
            if deplace in epingles:
                epingles[deplace] = origine
        else:
            epingles.pop(deplace, None)
            libres = grille.places_libres()
            if libres:
                grille.ecrire(libres[0], deplace)
            else:
                logger.warning("élève %r déplacé hors de la grille (aucune place libre)", deplace)

    epingles[identifiant] = cible
    return replace(plan, grille=grille, epingles=epingles)


def charger_plan(plan: Plan, charge: Plan) -> Plan:
    """Remplace l'agrégat tel quel (validation faite par `placement.persistance`)."""
    return charge


def tout_effacer(plan: Plan) -> Plan:
    return nouveau_plan()


# --------------------------------------------------------------------------- registre JSON

AppliqueurEdition = Callable[[Plan, Mapping[str, Any], Optional[int]], Plan]

_EDITIONS: Dict[str, AppliqueurEdition] = {}


def enregistrer_edition(type_edition: str):
    """Décorateur enregistrant l'application d'un type d'édition JSON."""

    def deco(fonction: AppliqueurEdition) -> AppliqueurEdition:
        _EDITIONS[type_edition] = fonction
        return fonction

    return deco


def types_edition() -> Tuple[str, ...]:
    return tuple(sorted(_EDITIONS))


def appliquer_edition(plan: Plan, code: Mapping[str, Any], *, seed: Optional[int] = None) -> Plan:
    """Applique une édition décrite par un dict JSON.

    Lève `ValueError` si le type est inconnu ou si les arguments sont invalides,
    `KeyError` si un champ obligatoire manque.
    """
    type_edition: str = str(code.get("type", ""))
    appliqueur: Optional[AppliqueurEdition] = _EDITIONS.get(type_edition)
    if appliqueur is None:
        raise ValueError(f"Type d'édition inconnu: {type_edition!r} (attendus : {', '.join(types_edition())})")
    logger.debug("édition %s sur « %s »", type_edition, plan.nom_classe)
    return appliqueur(plan, code, seed)


def _paire_ids(code: Mapping[str, Any]) -> Tuple[str, str]:
    ids = code["studentIds"]
    if not isinstance(ids, (list, tuple)) or len(ids) != 2:
        raise ValueError(f"studentIds doit contenir exactement deux identifiants: {ids!r}")
    return str(ids[0]), str(ids[1])


@enregistrer_edition("set_class_name")
def _ed_nom_classe(plan: Plan, code: Mapping[str, Any], seed: Optional[int]) -> Plan:
    return definir_nom_classe(plan, str(code.get("className", "")))


@enregistrer_edition("set_students")
def _ed_eleves(plan: Plan, code: Mapping[str, Any], seed: Optional[int]) -> Plan:
    eleves = [Eleve.depuis_code(s) for s in code["students"]]
    return definir_eleves(plan, eleves, seed=seed)


@enregistrer_edition("add_constraint")
def _ed_ajouter_contrainte(plan: Plan, code: Mapping[str, Any], seed: Optional[int]) -> Plan:
    ctx = ContexteFabrique(index_eleves=plan.index_eleves())
    contrainte_code = code.get("constraint", code)
    try:
        contrainte = contrainte_depuis_code(contrainte_code, ctx)
    except KeyError as exc:
        raise ValueError(str(exc)) from exc
    return ajouter_contrainte(plan, contrainte, seed=seed)


@enregistrer_edition("remove_constraint")
def _ed_retirer_contrainte(plan: Plan, code: Mapping[str, Any], seed: Optional[int]) -> Plan:
    a, b = _paire_ids(code)
    return retirer_contrainte(plan, a, b, seed=seed)


@enregistrer_edition("set_gender_mode")
def _ed_mode_genre(plan: Plan, code: Mapping[str, Any], seed: Optional[int]) -> Plan:
    return definir_mode_genre(plan, ModeGenre(str(code["mode"])), seed=seed)


@enregistrer_edition("set_row_preference")
def _ed_preference_rang(plan: Plan, code: Mapping[str, Any], seed: Optional[int]) -> Plan:
    return definir_preference_rang(
        plan, str(code["studentId"]), PreferenceRang(str(code.get("preference", "none"))), seed=seed
    )


@enregistrer_edition("set_grid_size")
def _ed_taille_grille(plan: Plan, code: Mapping[str, Any], seed: Optional[int]) -> Plan:
    return definir_taille_grille(plan, int(code["rows"]), int(code["cols"]), seed=seed)


@enregistrer_edition("move_student")
def _ed_deplacer(plan: Plan, code: Mapping[str, Any], seed: Optional[int]) -> Plan:
    cible = Position(rang=int(code["toRow"]), colonne=int(code["toCol"]))
    return deplacer_eleve(plan, str(code["studentId"]), cible)


@enregistrer_edition("load_plan")
def _ed_charger(plan: Plan, code: Mapping[str, Any], seed: Optional[int]) -> Plan:
    return charger_plan(plan, plan_depuis_dict(code["plan"]))


@enregistrer_edition("clear_all")
def _ed_effacer(plan: Plan, code: Mapping[str, Any], seed: Optional[int]) -> Plan:
    return tout_effacer(plan)
