"""
Fonction de score d'un placement.

Le score d'un élève sur une place est la somme de trois termes :

- rang : interpolation linéaire dans [-50, 50] selon la préférence
  `front`/`back` (0 sans préférence ou avec une seule rangée) ;
- paire : `poids()` de la contrainte liant l'élève à son voisin de table
  (-1000 pour `ban`, +50 pour `prefer`) ;
- genre : ±10 selon le mode de genre, seulement si la table a un voisin.

Le score ne dépend que de la rangée et du voisin de table : échanger deux
élèves ne modifie que les scores des deux places échangées et de leurs voisins.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Mapping, Optional

from ..contraintes.base import ContraintePaire
from ..modele.grille import Grille
from ..modele.plan import Plan
from ..modele.position import Position
from ..modele.types import Genre, ModeGenre, PreferenceRang

SCORE_RANG_MAX: float = 50.0
BONUS_GENRE: float = 10.0


@dataclass(frozen=True)
class DetailScore:
    """Décomposition du score d'un élève sur une place."""

    rang: float = 0.0
    paire: float = 0.0
    genre: float = 0.0

    @property
    def total(self) -> float:
        return self.rang + self.paire + self.genre


class IndexScore:
    """Index des données du plan utiles au score (accès en temps constant).

    Construit une fois par recherche locale : le plan est immuable pendant la
    résolution.
    """

    def __init__(self, plan: Plan) -> None:
        self.mode_genre: ModeGenre = plan.mode_genre
        self.genres: Dict[str, Genre] = {e.id(): e.genre() for e in plan.eleves}
        self.preferences: Mapping[str, PreferenceRang] = dict(plan.preferences_rang)
        self.contraintes: Dict[FrozenSet[str], ContraintePaire] = {c.cle(): c for c in plan.contraintes}


def score_rang(preference: PreferenceRang, rang: int, nb_rangs: int) -> float:
    """Terme de rang : +50 au rang préféré, -50 à l'opposé, linéaire entre les deux."""
    if preference == PreferenceRang.AUCUNE or nb_rangs <= 1:
        return 0.0
    fraction: float = rang / (nb_rangs - 1)
    if preference == PreferenceRang.DEVANT:
        return SCORE_RANG_MAX - fraction * 2 * SCORE_RANG_MAX
    return -SCORE_RANG_MAX + fraction * 2 * SCORE_RANG_MAX


def score_genre(mode: ModeGenre, genre_a: Optional[Genre], genre_b: Optional[Genre]) -> float:
    if mode == ModeGenre.AUCUN:
        return 0.0
    meme: bool = genre_a == genre_b
    if mode == ModeGenre.MEME:
        return BONUS_GENRE if meme else -BONUS_GENRE
    return -BONUS_GENRE if meme else BONUS_GENRE


def detail_score(
        plan: Plan,
        identifiant: str,
        position: Position,
        grille: Grille,
        *,
        index: Optional[IndexScore] = None,
) -> DetailScore:
    """Calcule les trois termes du score de `identifiant` placé en `position`.

    `grille` fournit le voisin de table ; l'occupant réel de `position` n'est
    pas lu, ce qui permet d'évaluer un échange hypothétique.
    """
    idx: IndexScore = index if index is not None else IndexScore(plan)

    terme_rang: float = score_rang(
        idx.preferences.get(identifiant, PreferenceRang.AUCUNE),
        position.rang,
        grille.nb_rangs(),
    )

    voisin: Optional[str] = grille.voisin(position)
    if voisin is None:
        return DetailScore(rang=terme_rang)

    terme_paire: float = 0.0
    contrainte: Optional[ContraintePaire] = idx.contraintes.get(frozenset((identifiant, voisin)))
    if contrainte is not None:
        terme_paire = contrainte.poids()

    terme_genre: float = score_genre(idx.mode_genre, idx.genres.get(identifiant), idx.genres.get(voisin))
    return DetailScore(rang=terme_rang, paire=terme_paire, genre=terme_genre)


def score_placement(
        plan: Plan,
        identifiant: str,
        position: Position,
        grille: Grille,
        *,
        index: Optional[IndexScore] = None,
) -> float:
    """Score local de `identifiant` en `position` compte tenu du reste de `grille`."""
    return detail_score(plan, identifiant, position, grille, index=index).total


def detail_total(plan: Plan, grille: Optional[Grille] = None) -> DetailScore:
    """Somme terme à terme des scores de toutes les places occupées.

    Utilise la grille du plan si `grille` n'est pas fournie.
    """
    g: Grille = grille if grille is not None else plan.grille
    idx: IndexScore = IndexScore(plan)
    rang = paire = genre = 0.0
    for pos in g.places_occupees():
        sid: Optional[str] = g.lire(pos)
        if sid is None:
            continue
        d = detail_score(plan, sid, pos, g, index=idx)
        rang += d.rang
        paire += d.paire
        genre += d.genre
    return DetailScore(rang=rang, paire=paire, genre=genre)


def score_total(plan: Plan, grille: Optional[Grille] = None) -> float:
    """Score global du placement (diagnostic, tests)."""
    return detail_total(plan, grille).total
