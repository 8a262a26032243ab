# motorpicks/services/notifications.py
from __future__ import annotations
from html import escape
from typing import Optional
import logging
import requests
from motorpicks.core.config import settings
from motorpicks.core.errors import NotificationError

logger = logging.getLogger(__name__)

DEFAULT_GREETING_NAME = "fanático de la F1"
SESSION_LABELS = {"qualy": "Clasificación", "race": "Carrera"}
DIRECTION_LABELS = {"mejor": "Mejor", "peor": "Peor"}


class ResendMailer:
    """Thin client for the Resend transactional email API."""

    def __init__(self, api_key: str, sender: str, base_url: str = "https://api.resend.com",
                 timeout: float = 10.0, http: Optional[requests.Session] = None):
        self.api_key = api_key
        self.sender = sender
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()

    def send(self, to: str, subject: str, html: str) -> dict:
        try:
            resp = self.http.post(
                f"{self.base_url}/emails",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={"from": self.sender, "to": [to], "subject": subject, "html": html},
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise NotificationError(f"email to {to} failed: {exc}") from exc
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            # accepted, but the body is not the JSON receipt we expect
            logger.info("Email to %s accepted with a non-JSON reply", to)
            return {}


def get_mailer() -> Optional[ResendMailer]:
    if not settings.resend_api_key:
        return None
    return ResendMailer(
        api_key=settings.resend_api_key,
        sender=settings.email_from,
        base_url=settings.resend_base_url,
        timeout=settings.email_timeout,
    )

def send_quietly(mailer, to: Optional[str], subject: str, html: str) -> bool:
    """Best-effort send: failures are logged and reported as False, never raised."""
    if mailer is None or not to:
        return False
    try:
        mailer.send(to, subject, html)
    except NotificationError as exc:
        logger.warning("Notification not delivered: %s", exc.message)
        return False
    except Exception:
        logger.warning("Notification not delivered to %s", to, exc_info=True)
        return False
    return True

# -----------------------
# Message builders
# -----------------------
def settlement_email(name: Optional[str], gp_name: str, mode: str, correct_count: int,
                     total_picks: int, result: str, dashboard_url: str) -> tuple[str, str]:
    subject = "🏁 Tus PICKS han sido procesados"
    html = f"""
        <p>Hola {escape(name or DEFAULT_GREETING_NAME)},</p>
        <p>Tus PICKS del GP <strong>{escape(gp_name)}</strong> han sido procesados.</p>
        <p><strong>Modo:</strong> {escape(mode)}<br/>
        <strong>Correctos:</strong> {correct_count} / {total_picks}<br/>
        <strong>Resultado:</strong> {escape(result.upper())}</p>
        <hr/>
        <p>Consulta más detalles en tu panel:</p>
        <p>🚀 <a href="{escape(dashboard_url)}">Ir al Dashboard</a></p>
    """
    return subject, html

def pick_confirmation_email(name: Optional[str], mode: str, wager_amount, selections: list[dict],
                            wallet_url: str) -> tuple[str, str]:
    rows = "".join(
        f"""
        <tr>
          <td>{escape(str(s.get("driver", "")))}</td>
          <td>{SESSION_LABELS.get(s.get("session_type"), "Carrera")}</td>
          <td>{float(s.get("line", 0)):.1f}</td>
          <td>{DIRECTION_LABELS.get(s.get("betterOrWorse"), "-")}</td>
        </tr>"""
        for s in selections
    )
    amount = int(wager_amount)
    subject = "✅ Confirmación de Picks - MotorManía"
    html = f"""
        <div style="font-family: sans-serif; color: #222;">
          <h2>Tus Picks Han Sido Registrados</h2>
          <p>Hola <strong>{escape(name or DEFAULT_GREETING_NAME)}</strong>,</p>
          <ul>
            <li><strong>Modo:</strong> {escape(mode)}</li>
            <li><strong>Monto:</strong> ${amount:,} COP</li>
          </ul>
          <table>
            <thead><tr><th>Piloto</th><th>Sesión</th><th>Línea</th><th>Pick</th></tr></thead>
            <tbody>{rows}</tbody>
          </table>
          <p>Puedes ver el resumen en tu <a href="{escape(wallet_url)}">billetera</a>.</p>
        </div>
    """
    return subject, html
