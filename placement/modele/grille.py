from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from .position import Position
from .table import Table

Case = Optional[str]  # identifiant d'élève ou None pour une place vide


class Grille:
    """
    Modélise la salle comme une matrice `rangs x colonnes` de places.

    Convention :
    - Le nombre de colonnes est toujours **pair** : les colonnes (0,1), (2,3), …
      forment des tables de deux. Deux places ne sont voisines que si elles
      appartiennent à la même table ; jamais d'une rangée à l'autre ni d'une
      table à la suivante.
    - Les dimensions sont fixées à la construction ; seul le contenu des cases
      change ensuite.

    Exemple :
        grille = Grille.vide(2, 4)      # 2 rangées de 2 tables
        grille.colonne_voisine(2) == 3
    """

    def __init__(self, cases: Sequence[Sequence[Case]], nb_colonnes: Optional[int] = None) -> None:
        """
        Args:
            cases: liste de rangées ; chaque rangée liste le contenu de ses places.
            nb_colonnes: largeur imposée, utile quand `cases` est vide.

        Lève `ValueError` si les rangées sont de longueurs différentes ou si la
        largeur est impaire.
        """
        # Copie des rangées
        self._cases: List[List[Case]] = [list(ligne) for ligne in cases]
        largeurs: set[int] = {len(ligne) for ligne in self._cases}
        if len(largeurs) > 1:
            raise ValueError(f"rangées de longueurs différentes: {sorted(largeurs)}")
        if nb_colonnes is None:
            nb_colonnes = largeurs.pop() if largeurs else 0
        elif largeurs and largeurs != {nb_colonnes}:
            raise ValueError(f"largeur {nb_colonnes} incohérente avec les rangées fournies")
        if nb_colonnes < 0 or nb_colonnes % 2 != 0:
            raise ValueError(f"le nombre de colonnes doit être pair et positif (reçu {nb_colonnes})")
        self._nb_colonnes: int = nb_colonnes

    @classmethod
    def vide(cls, nb_rangs: int, nb_colonnes: int) -> "Grille":
        """Construit une grille sans aucun élève."""
        if nb_rangs < 0:
            raise ValueError(f"nombre de rangées négatif: {nb_rangs}")
        return cls([[None] * nb_colonnes for _ in range(nb_rangs)], nb_colonnes=nb_colonnes)

    @classmethod
    def depuis_matrice(cls, matrice: Sequence[Sequence[Case]]) -> "Grille":
        """Construit une grille depuis une liste de listes (format JSON)."""
        return cls([[(str(c) if c else None) for c in ligne] for ligne in matrice])

    def en_matrice(self) -> List[List[Case]]:
        """Retourne une copie brute (liste de listes) du contenu."""
        return [list(ligne) for ligne in self._cases]

    def copie(self) -> "Grille":
        return Grille(self._cases, nb_colonnes=self._nb_colonnes)

    # --- Dimensions / topologie --------------------------------------------

    def nb_rangs(self) -> int:
        return len(self._cases)

    def nb_colonnes(self) -> int:
        return self._nb_colonnes

    def est_vide(self) -> bool:
        """Vrai si la grille n'a aucune place (0 rangée ou 0 colonne)."""
        return self.nb_rangs() == 0 or self._nb_colonnes == 0

    @staticmethod
    def colonne_voisine(colonne: int) -> int:
        """Retourne l'autre colonne de la même table : 0<->1, 2<->3, …"""
        return colonne ^ 1

    def contient(self, position: Position) -> bool:
        return 0 <= position.rang < self.nb_rangs() and 0 <= position.colonne < self._nb_colonnes

    def tables(self) -> List[Table]:
        """Énumère les tables, rangée par rangée puis de gauche à droite."""
        return [Table(rang=r, indice=i) for r in range(self.nb_rangs()) for i in range(self._nb_colonnes // 2)]

    # --- Lecture / écriture ------------------------------------------------

    def lire(self, position: Position) -> Case:
        """Retourne l'occupant de `position` ; lève `IndexError` hors grille."""
        self._verifier(position)
        return self._cases[position.rang][position.colonne]

    def ecrire(self, position: Position, identifiant: Case) -> None:
        """Place `identifiant` (ou `None`) en `position` ; lève `IndexError` hors grille."""
        self._verifier(position)
        self._cases[position.rang][position.colonne] = identifiant

    def voisin(self, position: Position) -> Case:
        """Retourne l'occupant de l'autre place de la table, s'il existe."""
        return self.lire(Position(position.rang, self.colonne_voisine(position.colonne)))

    def _verifier(self, position: Position) -> None:
        if not self.contient(position):
            raise IndexError(
                f"position ({position.rang}, {position.colonne}) hors de la grille "
                f"{self.nb_rangs()}x{self._nb_colonnes}"
            )

    # --- Parcours ----------------------------------------------------------

    def toutes_les_places(self) -> Iterator[Position]:
        """Énumère toutes les places dans l'ordre ligne par ligne (rang, puis colonne)."""
        for r in range(self.nb_rangs()):
            for c in range(self._nb_colonnes):
                yield Position(r, c)

    def places_occupees(self) -> List[Position]:
        return [p for p in self.toutes_les_places() if self._cases[p.rang][p.colonne] is not None]

    def places_libres(self) -> List[Position]:
        return [p for p in self.toutes_les_places() if self._cases[p.rang][p.colonne] is None]

    def position_de(self, identifiant: str) -> Optional[Position]:
        """Retourne la première position occupée par `identifiant`, ou `None`."""
        for p in self.toutes_les_places():
            if self._cases[p.rang][p.colonne] == identifiant:
                return p
        return None

    def occupants(self) -> List[str]:
        return [self._cases[p.rang][p.colonne] for p in self.places_occupees()]  # type: ignore[misc]

    # --- Protocole ---------------------------------------------------------

    def __eq__(self, autre: object) -> bool:
        return (
                isinstance(autre, Grille)
                and self._nb_colonnes == autre._nb_colonnes
                and self._cases == autre._cases
        )

    def __str__(self) -> str:
        """
        Représentation texte simple : rangée par rangée, tables séparées par « | ».
        Utile pour debug.
        """
        parts: List[str] = []
        for ligne in self._cases:
            tables = [
                " ".join(c or "." for c in ligne[i:i + 2])
                for i in range(0, len(ligne), 2)
            ]
            parts.append(" | ".join(tables))
        return "\n".join(parts)
