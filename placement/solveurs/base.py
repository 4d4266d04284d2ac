from __future__ import annotations

from abc import ABC, abstractmethod

from ..modele.grille import Grille
from ..modele.plan import Plan


class ResultatResolution:
    """Résultat d'une résolution.

    Attributs
    ---------
    grille : Grille
        Placement produit (sans occupant si le plan n'a ni élève ni place ;
        la forme de la grille du plan est alors conservée).
    passes : int
        Nombre de passes de recherche effectuées.
    echanges : int
        Nombre d'échanges conservés.
    evaluations : int
        Nombre d'échanges évalués.
    """

    def __init__(self, grille: Grille, passes: int = 0, echanges: int = 0, evaluations: int = 0) -> None:
        self.grille: Grille = grille
        self.passes: int = passes
        self.echanges: int = echanges
        self.evaluations: int = evaluations


class Solveur(ABC):
    """Interface abstraite des solveurs de placement."""

    @abstractmethod
    def resoudre(self, plan: Plan) -> ResultatResolution:
        """Construit une nouvelle grille pour `plan` ; ne lève jamais sur un plan bien formé."""
        raise NotImplementedError
