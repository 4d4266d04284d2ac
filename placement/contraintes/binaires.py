from __future__ import annotations

from typing import Mapping

from .base import ContraintePaire, sont_voisins
from .types import TypeContrainte
from ..modele.grille import Grille

POIDS_INTERDIT: float = -1000.0
POIDS_PREFERENCE: float = 50.0


class NeDoiventPasEtreVoisins(ContraintePaire):
    """Interdit que A et B partagent une table (pénalité lourde, pas une règle dure)."""

    def type_contrainte(self) -> TypeContrainte:
        return TypeContrainte.INTERDIT

    def poids(self) -> float:
        return POIDS_INTERDIT

    def est_satisfaite(self, grille: Grille) -> bool:
        return not sont_voisins(grille, self.a, self.b)

    def texte_humain(self, noms: Mapping[str, str]) -> str:
        return f"{noms.get(self.a, self.a)} et {noms.get(self.b, self.b)} ne doivent pas être voisins"


class DevraientEtreVoisins(ContraintePaire):
    """Favorise que A et B partagent une table."""

    def type_contrainte(self) -> TypeContrainte:
        return TypeContrainte.PREFERENCE

    def poids(self) -> float:
        return POIDS_PREFERENCE

    def est_satisfaite(self, grille: Grille) -> bool:
        return sont_voisins(grille, self.a, self.b)

    def texte_humain(self, noms: Mapping[str, str]) -> str:
        return f"{noms.get(self.a, self.a)} et {noms.get(self.b, self.b)} devraient être voisins"
