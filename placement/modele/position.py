from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Position:
    """Représente une *place précise* dans la grille.

    Attributs
    ---------
    rang : int
    Indice de rangée, du tableau vers le fond (0-indexé, 0 = premier rang).
    colonne : int
    Indice de colonne, de gauche à droite (0-indexé). Les colonnes (2k, 2k+1)
    forment une même table.


    Cette classe est immuable et ordonnée (rang puis colonne) : l'ordre naturel
    est l'ordre de parcours de la recherche locale.
    """

    rang: int
    colonne: int

    def cle(self) -> str:
        """Clé texte stable « rang,colonne » (pratique côté JSON/cache)."""
        return f"{self.rang},{self.colonne}"
