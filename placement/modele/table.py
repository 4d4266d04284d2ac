from __future__ import annotations

from typing import Iterable

from .position import Position


class Table:
    """Représente une table de deux places (un binôme) dans une rangée.


    Paramètres
    ----------
    rang : int
    Rangée (0 au premier rang, côté tableau).
    indice : int
    Indice de la table dans la rangée ; elle couvre les colonnes
    `2 * indice` et `2 * indice + 1`.
    """

    def __init__(self, rang: int, indice: int) -> None:
        assert rang >= 0 and indice >= 0, "indices de table négatifs"

        self._rang: int = rang
        self._indice: int = indice

    @property
    def rang(self) -> int:
        return self._rang

    @property
    def indice(self) -> int:
        return self._indice

    def colonnes(self) -> tuple[int, int]:
        """Retourne les deux colonnes couvertes par la table."""
        gauche: int = 2 * self._indice
        return gauche, gauche + 1

    def sieges(self) -> Iterable[Position]:
        """Itère sur les deux positions de la table, de gauche à droite."""
        colonne: int
        for colonne in self.colonnes():
            yield Position(self._rang, colonne)

    def __str__(self) -> str:
        return f"Table(rang={self._rang}, colonnes={self.colonnes()})"
