from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from ..contraintes.base import ContraintePaire
from .eleve import Eleve
from .grille import Grille
from .position import Position
from .types import ModeGenre, PreferenceRang


@dataclass(frozen=True)
class Plan:
    """Agrégat racine d'un plan de classe.

    Attributs
    ---------
    nom_classe : str
        Nom libre de la classe (titre des exports).
    eleves : Tuple[Eleve, ...]
        Élèves du plan, dans l'ordre d'import.
    contraintes : Tuple[ContraintePaire, ...]
        Au plus une contrainte par paire non ordonnée.
    preferences_rang : Mapping[str, PreferenceRang]
        id élève -> `front` ou `back` ; l'absence vaut `none`.
    mode_genre : ModeGenre
        Politique de composition des binômes, commune à toutes les tables.
    epingles : Mapping[str, Position]
        id élève -> place imposée par un déplacement manuel.
    grille : Grille
        Placement courant ; ses dimensions sont celles du plan.

    Le plan n'est jamais modifié en place : les éditions (`placement.editions`)
    construisent un nouveau plan avec `dataclasses.replace`.
    """

    nom_classe: str = ""
    eleves: Tuple[Eleve, ...] = ()
    contraintes: Tuple[ContraintePaire, ...] = ()
    preferences_rang: Mapping[str, PreferenceRang] = field(default_factory=dict)
    mode_genre: ModeGenre = ModeGenre.AUCUN
    epingles: Mapping[str, Position] = field(default_factory=dict)
    grille: Grille = field(default_factory=lambda: Grille.vide(0, 0))

    def nb_rangs(self) -> int:
        return self.grille.nb_rangs()

    def nb_colonnes(self) -> int:
        return self.grille.nb_colonnes()

    def index_eleves(self) -> Dict[str, Eleve]:
        """Retourne l'index id -> élève."""
        return {e.id(): e for e in self.eleves}

    def eleve(self, identifiant: str) -> Optional[Eleve]:
        for e in self.eleves:
            if e.id() == identifiant:
                return e
        return None

    def contrainte_entre(self, a: str, b: str) -> Optional[ContraintePaire]:
        """Retourne la contrainte portant sur la paire {a, b}, ou `None`."""
        for c in self.contraintes:
            if c.concerne(a, b):
                return c
        return None

    def noms_affiches(self) -> Dict[str, str]:
        return {e.id(): e.affichage_nom() for e in self.eleves}
