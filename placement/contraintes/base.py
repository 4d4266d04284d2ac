from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from ..modele.grille import Grille
from ..modele.position import Position
from .types import TypeContrainte


class ContraintePaire(ABC):
    """Classe de base des contraintes portant sur une paire *non ordonnée* d'élèves.

    Méthodes à implémenter
    ----------------------
    - `type_contrainte()` : retourne un membre de `TypeContrainte`.
    - `poids()` : contribution au score de chacun des deux élèves quand ils
      partagent la même table.
    - `est_satisfaite(grille)` : état de la contrainte dans une grille donnée.
    - `texte_humain(noms)` : texte lisible pour l'interface et les exports.

    Deux contraintes portant sur la même paire ont la même `cle()` quel que
    soit l'ordre des élèves ; le plan n'en garde jamais qu'une par clé.
    """

    def __init__(self, a: str, b: str) -> None:
        if not a or not b:
            raise ValueError("une contrainte de paire exige deux identifiants")
        if a == b:
            raise ValueError(f"une contrainte de paire exige deux élèves distincts (reçu {a!r} deux fois)")
        self.a: str = a
        self.b: str = b

    @abstractmethod
    def type_contrainte(self) -> TypeContrainte:
        """Retourne le type logique de la contrainte."""
        raise NotImplementedError

    @abstractmethod
    def poids(self) -> float:
        """Points ajoutés au score d'un élève assis à côté de l'autre."""
        raise NotImplementedError

    @abstractmethod
    def est_satisfaite(self, grille: Grille) -> bool:
        """Indique si la contrainte est respectée dans `grille`."""
        raise NotImplementedError

    @abstractmethod
    def texte_humain(self, noms: Mapping[str, str]) -> str:
        """Texte concis, lisible par un humain (`noms` : id -> nom affiché)."""
        raise NotImplementedError

    def implique(self) -> Tuple[str, str]:
        """Retourne les deux identifiants, dans l'ordre de saisie."""
        return self.a, self.b

    def cle(self) -> FrozenSet[str]:
        """Clé non ordonnée de la paire."""
        return frozenset((self.a, self.b))

    def concerne(self, a: str, b: str) -> bool:
        return self.cle() == frozenset((a, b))

    def code_machine(self) -> Dict[str, Any]:
        """Représentation sérialisable, stable et exploitable par des outils."""
        return {"type": self.type_contrainte().value, "studentIds": [self.a, self.b]}

    def __eq__(self, autre: object) -> bool:
        return (
                isinstance(autre, ContraintePaire)
                and self.type_contrainte() == autre.type_contrainte()
                and self.cle() == autre.cle()
        )

    def __hash__(self) -> int:
        return hash((self.type_contrainte(), self.cle()))

    def __repr__(self) -> str:  # pragma: no cover - représentation
        return f"{type(self).__name__}({self.a!r}, {self.b!r})"


def sont_voisins(grille: Grille, a: str, b: str) -> bool:
    """Retourne `True` si `a` et `b` occupent les deux places d'une même table."""
    pa: Optional[Position] = grille.position_de(a)
    if pa is None:
        return False
    return grille.voisin(pa) == b
