# placement/views.py
from __future__ import annotations

"""
Vues de l’application "placement".

Contenu :
- Point de santé (sante)
- Import CSV d’une liste d’élèves (importer_csv)
- Validation d’un plan sauvegardé (charger_plan)
- Démarrage et polling d’une tâche Celery de recalcul (edition_start / edition_status)
- Export SVG / PDF / JSON avec cache éphémère et téléchargement

Points notables :
- Le serveur ne garde aucun plan : chaque requête transporte le plan courant.
- Les artefacts sont stockés en cache sous une clé éphémère pl:{token}:{fmt}
  (+ pl:{token}:{fmt}:name pour le nom de fichier).
- Une seule requête de recalcul compte par canal : la dernière lancée
  (pl:canal:{canal} -> task_id) ; les résultats plus anciens sont marqués
  "superseded".
"""

import json
import logging
import re
import uuid
from typing import Any, Dict, Mapping, Optional

from django.conf import settings
from django.core.cache import cache
from django.http import (
    HttpRequest,
    HttpResponse,
    HttpResponseNotFound,
    JsonResponse,
)
from django.urls import reverse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from .import_csv import parser_csv
from .modele.plan import Plan
from .persistance import PlanInvalide, plan_depuis_dict, plan_vers_dict, plan_vers_json
from .solveurs.score import score_total
from .utils_svg import svg_depuis_plan

logger = logging.getLogger(__name__)

_TYPES_CONTENU: Dict[str, str] = {
    "svg": "image/svg+xml",
    "pdf": "application/pdf",
    "json": "application/json; charset=utf-8",
}


def _ttl() -> int:
    return int(getattr(settings, "PLACEMENT_EXPORT_TTL", 3600))


def _json_body(request: HttpRequest) -> Any:
    """Décode le corps JSON ; lève `ValueError` s’il est illisible."""
    try:
        return json.loads((request.body or b"{}").decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValueError("JSON invalide") from exc


# ---------------------------------------------------------------------------
# Pages basiques
# ---------------------------------------------------------------------------

def sante(request: HttpRequest) -> HttpResponse:
    """
    Point de santé (sans DB/cache), utile pour load balancer / monitoring.
    """
    return JsonResponse({"ok": True, "service": "placement", "version": 1})


# ---------------------------------------------------------------------------
# Import / chargement
# ---------------------------------------------------------------------------

@csrf_exempt
@require_POST
def importer_csv(request: HttpRequest) -> HttpResponse:
    """
    Analyse une liste d’élèves au format CSV.
    - Body : texte CSV brut, ou JSON {"csv": "..."}
    - Réponse : {"students": [...], "errors": [...]} ; les lignes invalides
      n’empêchent pas l’import des autres.
    """
    try:
        texte: str = request.body.decode("utf-8-sig")
    except UnicodeDecodeError:
        return JsonResponse({"error": "encodage invalide (UTF-8 attendu)"}, status=400)

    if request.content_type == "application/json":
        try:
            texte = str(json.loads(texte or "{}").get("csv", ""))
        except (json.JSONDecodeError, AttributeError):
            return JsonResponse({"error": "JSON invalide"}, status=400)

    resultat = parser_csv(texte)
    return JsonResponse({
        "students": [e.code_machine() for e in resultat.eleves],
        "errors": resultat.erreurs,
    })


@csrf_exempt
@require_POST
def charger_plan(request: HttpRequest) -> HttpResponse:
    """
    Valide un plan sauvegardé (JSON) et le renvoie normalisé.
    Un document invalide est refusé en entier (400 + message).
    """
    try:
        plan: Plan = plan_depuis_dict(_json_body(request))
    except (PlanInvalide, ValueError) as exc:
        return JsonResponse({"error": str(exc)}, status=400)
    return JsonResponse({"status": "OK", "plan": plan_vers_dict(plan), "score": score_total(plan)})


# ---------------------------------------------------------------------------
# Celery : démarrage + polling
# ---------------------------------------------------------------------------

@csrf_exempt
@require_POST
def edition_start(request: HttpRequest) -> HttpResponse:
    """
    Lance la tâche Celery d’édition + recalcul :
    - Body : {"plan": {...}, "edit": {"type": ...}, "seed"?: int, "channel"?: str}
    - Réponse : {"task_id": "..."} à poller via edition_status
    """
    from .tasks import t_appliquer_edition

    try:
        data: Dict[str, Any] = _json_body(request)
    except ValueError as exc:
        return JsonResponse({"error": str(exc)}, status=400)
    if not isinstance(data, dict) or not isinstance(data.get("edit"), dict):
        return JsonResponse({"error": "champ « edit » manquant"}, status=400)

    task = t_appliquer_edition.delay(data)

    canal: str = str(data.get("channel") or "").strip()
    if canal:
        cache.set(f"pl:canal:{canal}", task.id, _ttl())
    return JsonResponse({"task_id": task.id})


@require_GET
def edition_status(request: HttpRequest, task_id: str) -> HttpResponse:
    """
    Polling d’état (PENDING / STARTED / SUCCESS / FAILURE).
    En cas de SUCCESS, renvoie aussi le résultat (nouveau plan).
    Avec ?channel=..., signale si une requête plus récente a été lancée.
    """
    from celery.result import AsyncResult

    canal: str = request.GET.get("channel", "").strip()
    superseded: bool = False
    if canal:
        dernier: Optional[str] = cache.get(f"pl:canal:{canal}")
        superseded = dernier is not None and dernier != task_id

    ar = AsyncResult(task_id)
    if ar.state in ("PENDING", "RECEIVED", "STARTED", "RETRY"):
        return JsonResponse({"status": ar.state, "superseded": superseded})
    if ar.state == "SUCCESS":
        return JsonResponse({**ar.result, "superseded": superseded})

    # FAILURE
    logger.error("tâche %s en échec: %r", task_id, ar.result)
    return JsonResponse({"status": "FAILURE", "error": str(ar.result) or "échec.", "superseded": superseded})


# ---------------------------------------------------------------------------
# Export (SVG, PDF, JSON)
# ---------------------------------------------------------------------------

def _slugify_filename(name: str) -> str:
    """
    Transforme un nom libre en un "slug" sûr pour un nom de fichier :
    "5e B / Salle 12" -> "5e-B-Salle-12"
    """
    safe = re.sub(r"[^\w\-]+", "-", name, flags=re.UNICODE).strip("-_")
    return safe or "plan"


def _svg_to_pdf(svg_bytes: bytes) -> Optional[bytes]:
    """
    Convertit SVG -> PDF via CairoSVG (si la bibliothèque cairo est disponible).
    """
    try:
        import cairosvg  # type: ignore
    except (ImportError, OSError) as exc:
        logger.warning("export PDF indisponible: %s", exc)
        return None
    return cairosvg.svg2pdf(bytestring=svg_bytes, background_color="white")


def _cache_artifacts_and_urls(
        artifacts: Mapping[str, bytes],
        names: Mapping[str, str],
        token: Optional[str] = None,
) -> Dict[str, str]:
    """
    Stocke chaque artefact en cache et renvoie un dict fmt -> URL de téléchargement.
    Enregistre aussi le nom de fichier (pl:{token}:{fmt}:name) pour l’en-tête.
    """
    tok = token or uuid.uuid4().hex
    ttl = _ttl()
    fmt_to_url: Dict[str, str] = {}

    for fmt, blob in artifacts.items():
        if not blob:
            continue
        key = f"pl:{tok}:{fmt}"
        cache.set(key, blob, ttl)
        if names.get(fmt):
            cache.set(f"{key}:name", names[fmt], ttl)
        fmt_to_url[fmt] = reverse("placement:download", kwargs={"token": tok, "fmt": fmt})

    return fmt_to_url


@csrf_exempt
@require_POST
def export_plan(request: HttpRequest) -> HttpResponse:
    """
    Génère les artefacts à partir du plan envoyé par le front.

    Sortie (JSON) :
      {"status": "OK", "download": {"svg": "...", "pdf": "...", "json": "..."}}
    """
    try:
        plan: Plan = plan_depuis_dict(_json_body(request))
    except (PlanInvalide, ValueError) as exc:
        return JsonResponse({"error": str(exc)}, status=400)

    prefix: str = (
        f"plan_de_classe_{_slugify_filename(plan.nom_classe)}_{timezone.now().strftime('%d-%m')}"
    )
    svg_bytes: bytes = svg_depuis_plan(plan).encode("utf-8")
    pdf_bytes: Optional[bytes] = _svg_to_pdf(svg_bytes)

    urls = _cache_artifacts_and_urls(
        artifacts={
            "svg": svg_bytes,
            "pdf": pdf_bytes or b"",
            "json": plan_vers_json(plan).encode("utf-8"),
        },
        names={
            "svg": f"{prefix}.svg",
            "pdf": f"{prefix}.pdf",
            "json": f"{prefix}.json",
        },
    )
    return JsonResponse({"status": "OK", "download": urls})


@require_GET
def download_artifact(request: HttpRequest, token: str, fmt: str) -> HttpResponse:
    """
    Sert un artefact depuis le cache via {token} et {fmt}.
    """
    key = f"pl:{token}:{fmt}"
    blob: Optional[bytes] = cache.get(key)  # type: ignore[assignment]
    if blob is None:
        return HttpResponseNotFound("introuvable ou expiré")

    filename = cache.get(f"{key}:name") or f"plan-de-classe.{fmt}"
    resp = HttpResponse(blob, content_type=_TYPES_CONTENU.get(fmt, "application/octet-stream"))
    resp["Content-Disposition"] = f'attachment; filename="{filename}"'
    return resp
