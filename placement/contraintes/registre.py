from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from .types import TypeContrainte
from .base import ContraintePaire
from ..modele.eleve import Eleve

FabriqueContrainte = Callable[[Mapping[str, Any], "ContexteFabrique"], ContraintePaire]


class ContexteFabrique:
    """Contexte nécessaire pour reconstruire une contrainte à partir d'un dict.

    Attributs
    ---------
    index_eleves : Mapping[str, Eleve]
        Index permettant de vérifier qu'un identifiant désigne un élève du plan.
    """

    def __init__(self, index_eleves: Mapping[str, Eleve]) -> None:
        self.index_eleves: Mapping[str, Eleve] = index_eleves

    def verifier(self, identifiant: Any) -> str:
        """Retourne l'identifiant normalisé ; lève `KeyError` s'il est inconnu."""
        sid: str = str(identifiant)
        if sid not in self.index_eleves:
            raise KeyError(f"élève inconnu: {sid!r}")
        return sid


_REGISTRE: Dict[TypeContrainte, FabriqueContrainte] = {}


def enregistrer(type_c: TypeContrainte):
    """Décorateur enregistrant une fabrique pour un `TypeContrainte`."""

    def deco(fabrique: FabriqueContrainte) -> FabriqueContrainte:
        _REGISTRE[type_c] = fabrique
        return fabrique

    return deco


def fabrique_de(type_c: TypeContrainte) -> Optional[FabriqueContrainte]:
    """Retourne la fabrique enregistrée pour `type_c`, ou `None` si absente."""
    return _REGISTRE.get(type_c)


def contrainte_depuis_code(code: Mapping[str, Any], contexte: ContexteFabrique) -> ContraintePaire:
    """Reconstitue une contrainte à partir d'un dictionnaire « code_machine ».

    Lève `ValueError` si le type est inconnu, `KeyError` si aucune fabrique
    n'est enregistrée pour ce type ou si un élève est inconnu.
    """
    type_valeur: str = str(code.get("type", ""))
    try:
        type_c: TypeContrainte = TypeContrainte(type_valeur)
    except ValueError as exc:
        raise ValueError(f"Type de contrainte inconnu: {type_valeur!r}") from exc

    fab: Optional[FabriqueContrainte] = fabrique_de(type_c)
    if fab is None:
        raise KeyError(f"Aucune fabrique enregistrée pour le type {type_c}")
    return fab(code, contexte)
