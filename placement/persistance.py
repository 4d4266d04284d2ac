"""
Sauvegarde / chargement d'un plan au format JSON.

Le document reprend tous les champs du plan tels quels, grille comprise :

    {
      "format": "placement-plan", "version": 1,
      "className": "...",
      "students": [{"id", "firstName", "lastName", "gender"}, ...],
      "constraints": [{"type": "ban" | "prefer", "studentIds": [a, b]}, ...],
      "rowPreferences": [{"studentId", "preference"}, ...],
      "genderMode": "none" | "same" | "different",
      "pins": [{"studentId", "row", "col"}, ...],
      "grid": [[id | null, ...], ...], "gridRows": R, "gridCols": C
    }

Les anciens documents (sans `pins`, épingles codées comme contraintes
`manual` réflexives) restent lisibles : l'épingle prend la place actuelle de
l'élève dans la grille chargée.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .contraintes.base import ContraintePaire
from .contraintes.registre import ContexteFabrique, contrainte_depuis_code
from .contraintes.types import TypeContrainte
from .contraintes import enregistrement  # noqa: F401  (remplit le registre des contraintes)
from .modele.eleve import Eleve
from .modele.grille import Grille
from .modele.plan import Plan
from .modele.position import Position
from .modele.types import ModeGenre, PreferenceRang

logger = logging.getLogger(__name__)

FORMAT: str = "placement-plan"
VERSION: int = 1


class PlanInvalide(ValueError):
    """Document de plan structurellement invalide ; le message est montrable à l'utilisateur."""


# --------------------------------------------------------------------------- export

def plan_vers_dict(plan: Plan) -> Dict[str, Any]:
    """Construit un dict JSON ré-importable (auto-documenté, versionné)."""
    return {
        "format": FORMAT,
        "version": VERSION,
        "className": plan.nom_classe,
        "students": [e.code_machine() for e in plan.eleves],
        "constraints": [c.code_machine() for c in plan.contraintes],
        "rowPreferences": [
            {"studentId": sid, "preference": pref.value}
            for sid, pref in plan.preferences_rang.items()
        ],
        "genderMode": plan.mode_genre.value,
        "pins": [
            {"studentId": sid, "row": pos.rang, "col": pos.colonne}
            for sid, pos in plan.epingles.items()
        ],
        "grid": plan.grille.en_matrice(),
        "gridRows": plan.nb_rangs(),
        "gridCols": plan.nb_colonnes(),
    }


def plan_vers_json(plan: Plan) -> str:
    return json.dumps(plan_vers_dict(plan), ensure_ascii=False, indent=2)


# --------------------------------------------------------------------------- import

def plan_depuis_json(texte: str) -> Plan:
    """Lit un document JSON ; lève `PlanInvalide` s'il est mal formé."""
    try:
        donnees: Any = json.loads(texte)
    except (json.JSONDecodeError, TypeError) as exc:
        raise PlanInvalide(f"Fichier illisible : JSON invalide ({exc})") from exc
    return plan_depuis_dict(donnees)


def plan_depuis_dict(donnees: Any) -> Plan:
    """Reconstitue un plan à partir d'un dict.

    Exige que `students`, `constraints` et `grid` soient des listes ; toute autre
    incohérence de structure lève aussi `PlanInvalide`.
    """
    if not isinstance(donnees, Mapping):
        raise PlanInvalide("Fichier invalide : objet JSON attendu")
    for cle in ("students", "constraints", "grid"):
        if not isinstance(donnees.get(cle), list):
            raise PlanInvalide(f"Fichier invalide : liste « {cle} » manquante")

    try:
        eleves: List[Eleve] = [Eleve.depuis_code(s) for s in donnees["students"]]
        index: Dict[str, Eleve] = {e.id(): e for e in eleves}
        if len(index) != len(eleves):
            raise ValueError("identifiants d'élèves en double")

        grille: Grille = _grille_depuis(donnees)
        contraintes, anciennes_epingles = _contraintes_depuis(donnees["constraints"], index)

        epingles: Dict[str, Position] = _epingles_depuis(donnees.get("pins") or [], index)
        for sid in anciennes_epingles:
            if sid in epingles:
                continue
            pos: Optional[Position] = grille.position_de(sid)
            if pos is None:
                logger.info("épingle « manual » ignorée pour %r : élève absent de la grille", sid)
                continue
            epingles[sid] = pos

        preferences: Dict[str, PreferenceRang] = {}
        for p in donnees.get("rowPreferences") or []:
            sid = str(p["studentId"])
            if sid not in index:
                raise KeyError(f"préférence de rang pour un élève inconnu: {sid!r}")
            pref = PreferenceRang(str(p.get("preference", "none")))
            if pref != PreferenceRang.AUCUNE:
                preferences[sid] = pref

        mode = ModeGenre(str(donnees.get("genderMode") or ModeGenre.AUCUN.value))
    except (KeyError, ValueError, TypeError) as exc:
        raise PlanInvalide(f"Fichier invalide : {exc}") from exc

    return Plan(
        nom_classe=str(donnees.get("className") or ""),
        eleves=tuple(eleves),
        contraintes=tuple(contraintes),
        preferences_rang=preferences,
        mode_genre=mode,
        epingles=epingles,
        grille=grille,
    )


def _grille_depuis(donnees: Mapping[str, Any]) -> Grille:
    matrice = donnees["grid"]
    if not all(isinstance(ligne, list) for ligne in matrice):
        raise ValueError("chaque rangée de « grid » doit être une liste")
    if matrice:
        return Grille.depuis_matrice(matrice)
    # grille vide : on conserve les dimensions déclarées, s'il y en a
    return Grille.vide(int(donnees.get("gridRows") or 0), int(donnees.get("gridCols") or 0))


def _contraintes_depuis(
        codes: List[Any],
        index: Mapping[str, Eleve],
) -> Tuple[List[ContraintePaire], List[str]]:
    """Sépare les contraintes de paire des anciens marqueurs `manual`."""
    ctx = ContexteFabrique(index_eleves=index)
    contraintes: Dict[frozenset, ContraintePaire] = {}
    manuels: List[str] = []
    for code in codes:
        if not isinstance(code, Mapping):
            raise ValueError(f"contrainte mal formée: {code!r}")
        if code.get("type") == TypeContrainte.MANUEL.value:
            ids = code.get("studentIds") or []
            if ids:
                manuels.append(ctx.verifier(ids[0]))
            continue
        c = contrainte_depuis_code(code, ctx)
        # une seule contrainte par paire : la dernière l'emporte
        contraintes.pop(c.cle(), None)
        contraintes[c.cle()] = c
    return list(contraintes.values()), manuels


def _epingles_depuis(codes: List[Any], index: Mapping[str, Eleve]) -> Dict[str, Position]:
    epingles: Dict[str, Position] = {}
    for code in codes:
        sid = str(code["studentId"])
        if sid not in index:
            raise KeyError(f"épingle pour un élève inconnu: {sid!r}")
        epingles[sid] = Position(rang=int(code["row"]), colonne=int(code["col"]))
    return epingles
