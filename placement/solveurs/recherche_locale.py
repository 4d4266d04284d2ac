from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Set

from .base import Solveur, ResultatResolution
from .score import IndexScore, score_placement
from ..modele.grille import Grille
from ..modele.plan import Plan
from ..modele.position import Position

logger = logging.getLogger(__name__)

PASSES_MAX: int = 100


class SolveurRechercheLocale(Solveur):
    """Placement aléatoire puis amélioration par échanges (hill-climbing).

    Caractéristiques
    ----------------
    - Les élèves épinglés sont posés sur leur place et ne bougent jamais ;
      ils restent néanmoins des voisins pour le score des autres.
    - Les autres élèves sont mélangés (`random.Random(seed)`) puis posés sur
      les places libres, ligne par ligne.
    - Chaque passe parcourt les paires de places occupées non épinglées dans
      l'ordre (rang, colonne) et garde le *premier* échange qui augmente
      strictement la somme des deux scores, puis recommence. Une passe sans
      échange, ou `passes_max` passes, arrêtent la recherche.
    - Aucune relance : l'optimum obtenu est local.
    """

    def __init__(self, *, seed: Optional[int] = None, passes_max: int = PASSES_MAX) -> None:
        self.seed: Optional[int] = seed
        self.passes_max: int = passes_max

    def resoudre(self, plan: Plan) -> ResultatResolution:
        nb_rangs: int = plan.nb_rangs()
        nb_colonnes: int = plan.nb_colonnes()
        if not plan.eleves or plan.grille.est_vide():
            # aucune place à remplir : la forme demandée est conservée, sans occupant
            return ResultatResolution(Grille.vide(nb_rangs, nb_colonnes))

        rng = random.Random(self.seed)
        grille: Grille = Grille.vide(nb_rangs, nb_colonnes)

        epingles: Set[str] = self._poser_epingles(plan, grille)

        # Placement initial : permutation uniforme des élèves libres
        libres: List[str] = [e.id() for e in plan.eleves if e.id() not in epingles]
        rng.shuffle(libres)
        places: List[Position] = grille.places_libres()
        for sid, pos in zip(libres, places):
            grille.ecrire(pos, sid)
        if len(libres) > len(places):
            logger.info("%d élève(s) sans place (grille %dx%d)", len(libres) - len(places), nb_rangs, nb_colonnes)

        passes, echanges, evaluations = self._ameliorer(plan, grille, epingles)
        logger.debug(
            "recherche locale: %d passe(s), %d échange(s), %d évaluation(s)", passes, echanges, evaluations
        )
        return ResultatResolution(grille, passes=passes, echanges=echanges, evaluations=evaluations)

    # ------------------------------------------------------------------ étapes

    def _poser_epingles(self, plan: Plan, grille: Grille) -> Set[str]:
        """Pose les élèves épinglés ; retourne les identifiants effectivement posés.

        Une épingle inutilisable (élève inconnu, place hors grille, place déjà
        prise) est ignorée et l'élève redevient libre.
        """
        connus: Set[str] = {e.id() for e in plan.eleves}
        poses: Set[str] = set()
        for sid, pos in plan.epingles.items():
            if sid not in connus:
                logger.warning("épingle ignorée: élève inconnu %r", sid)
                continue
            if not grille.contient(pos):
                logger.warning("épingle ignorée: %r hors grille en %s", sid, pos.cle())
                continue
            if grille.lire(pos) is not None:
                logger.warning("épingle ignorée: place %s déjà prise (élève %r)", pos.cle(), sid)
                continue
            grille.ecrire(pos, sid)
            poses.add(sid)
        return poses

    def _ameliorer(self, plan: Plan, grille: Grille, epingles: Set[str]) -> tuple[int, int, int]:
        """Hill-climbing « premier échange améliorant » ; modifie `grille` en place."""
        index = IndexScore(plan)
        passes: int = 0
        echanges: int = 0
        evaluations: int = 0

        ameliore: bool = True
        while ameliore and passes < self.passes_max:
            ameliore = False
            passes += 1

            mobiles: List[Position] = [
                p for p in grille.places_occupees() if grille.lire(p) not in epingles
            ]
            for i, p1 in enumerate(mobiles):
                for p2 in mobiles[i + 1:]:
                    evaluations += 1
                    if self._echange_ameliore(plan, grille, p1, p2, index):
                        echanges += 1
                        ameliore = True
                        break
                if ameliore:
                    break
        return passes, echanges, evaluations

    @staticmethod
    def _echange_ameliore(plan: Plan, grille: Grille, p1: Position, p2: Position, index: IndexScore) -> bool:
        """Tente l'échange p1 <-> p2 ; le garde s'il augmente strictement le score."""
        id1: str = grille.lire(p1)  # type: ignore[assignment]
        id2: str = grille.lire(p2)  # type: ignore[assignment]

        avant: float = (
                score_placement(plan, id1, p1, grille, index=index)
                + score_placement(plan, id2, p2, grille, index=index)
        )

        grille.ecrire(p1, id2)
        grille.ecrire(p2, id1)
        apres: float = (
                score_placement(plan, id2, p1, grille, index=index)
                + score_placement(plan, id1, p2, grille, index=index)
        )

        if apres > avant:
            return True

        grille.ecrire(p1, id1)
        grille.ecrire(p2, id2)
        return False


def generer_placement(plan: Plan, *, seed: Optional[int] = None, passes_max: int = PASSES_MAX) -> Grille:
    """Raccourci : construit une nouvelle grille pour `plan` (fonction totale)."""
    return SolveurRechercheLocale(seed=seed, passes_max=passes_max).resoudre(plan).grille


def positions_epinglees(grille: Grille, plan: Plan) -> Dict[str, Position]:
    """Retourne, parmi les épingles du plan, celles que la grille respecte."""
    return {
        sid: pos for sid, pos in plan.epingles.items()
        if grille.contient(pos) and grille.lire(pos) == sid
    }
