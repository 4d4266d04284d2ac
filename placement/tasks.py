from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from celery import shared_task

from .editions import appliquer_edition, nouveau_plan
from .modele.plan import Plan
from .persistance import PlanInvalide, plan_depuis_dict, plan_vers_dict
from .solveurs.score import score_total

logger = logging.getLogger(__name__)


# --------------------------------------------------------------------------- helpers de conversion

def _plan_from_payload(payload: Dict[str, Any]) -> Plan:
    """Plan courant envoyé par le front ; plan vide s'il est absent."""
    brut = payload.get("plan")
    if brut is None:
        return nouveau_plan()
    return plan_depuis_dict(brut)


def _parse_seed(payload: Dict[str, Any]) -> Optional[int]:
    """Graine facultative (reproductibilité des démonstrations et des tests)."""
    seed_raw: Any = payload.get("seed")
    if seed_raw is None:
        return None
    try:
        return int(seed_raw)
    except (TypeError, ValueError):
        logger.warning("graine ignorée: %r", seed_raw)
        return None


# --------------------------------------------------------------------------- tâche principale

@shared_task(bind=True)
def t_appliquer_edition(self, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Tâche asynchrone de recalcul :
      - reconstruit le plan courant depuis le payload,
      - applique l'édition demandée (qui relance le placement si besoin),
      - renvoie le nouveau plan sérialisé et son score.

    Les erreurs de saisie (plan mal formé, édition invalide) sont renvoyées
    comme résultat `FAILURE` plutôt que levées.
    """
    edition: Dict[str, Any] = payload.get("edit") or {}
    seed = _parse_seed(payload)

    try:
        plan = _plan_from_payload(payload)
    except PlanInvalide as exc:
        return {"status": "FAILURE", "error": str(exc)}

    try:
        nouveau = appliquer_edition(plan, edition, seed=seed)
    except (KeyError, ValueError, TypeError) as exc:
        logger.info("édition refusée (%s): %s", edition.get("type"), exc)
        return {"status": "FAILURE", "error": f"Édition invalide : {exc}"}

    score = score_total(nouveau)
    logger.info(
        "édition %s appliquée à « %s » (tâche %s) : %d/%d élève(s) placé(s), score %.1f",
        edition.get("type"), nouveau.nom_classe, self.request.id,
        len(nouveau.grille.occupants()), len(nouveau.eleves), score,
    )
    return {
        "status": "SUCCESS",
        "plan": plan_vers_dict(nouveau),
        "score": score,
        "edit": edition.get("type"),
        "seed": seed,
    }
