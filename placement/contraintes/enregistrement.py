from __future__ import annotations

from typing import Any, Mapping, Sequence

from .types import TypeContrainte
from .registre import enregistrer, ContexteFabrique
from .binaires import NeDoiventPasEtreVoisins, DevraientEtreVoisins


def _paire(code: Mapping[str, Any], ctx: ContexteFabrique) -> tuple[str, str]:
    """Lit `studentIds` (ou, à défaut, les clés `a`/`b`) et vérifie les deux élèves."""
    ids: Sequence[Any]
    if "studentIds" in code:
        ids = code["studentIds"]
        if not isinstance(ids, (list, tuple)) or len(ids) != 2:
            raise ValueError(f"studentIds doit contenir exactement deux identifiants: {ids!r}")
    else:
        ids = (code["a"], code["b"])
    return ctx.verifier(ids[0]), ctx.verifier(ids[1])


@enregistrer(TypeContrainte.INTERDIT)
def _fab_interdit(code: Mapping[str, Any], ctx: ContexteFabrique):
    a, b = _paire(code, ctx)
    return NeDoiventPasEtreVoisins(a, b)


@enregistrer(TypeContrainte.PREFERENCE)
def _fab_preference(code: Mapping[str, Any], ctx: ContexteFabrique):
    a, b = _paire(code, ctx)
    return DevraientEtreVoisins(a, b)
