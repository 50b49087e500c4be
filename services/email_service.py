import logging
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    Transactional email for the freelance dashboard.
    Sends invitation links via SendGrid; without credentials it only logs a mock email.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        sender_email: Optional[str] = None,
        frontend_url: Optional[str] = None,
        invite_expire_days: Optional[int] = None,
    ):
        self.sendgrid_api_key = api_key if api_key is not None else settings.SENDGRID_API_KEY
        self.sender_email = sender_email if sender_email is not None else settings.MAIL_FROM
        self.frontend_url = (frontend_url or settings.FRONTEND_URL).rstrip("/")
        self.invite_expire_days = invite_expire_days or settings.INVITE_TOKEN_EXPIRE_DAYS

        self.enabled = bool(self.sendgrid_api_key and self.sender_email)
        if not self.enabled:
            logger.warning("📧 Email service not configured. Missing SENDGRID_API_KEY or MAIL_FROM.")
        else:
            logger.info("📧 Email service configured and ready. Sender: %s", self.sender_email)

    def invitation_link(self, invite_token: str) -> str:
        return f"{self.frontend_url}/accept-invitation?token={invite_token}"

    # ============================================================
    # ✅ Send Invitation Email (synchronous for BackgroundTasks)
    # ============================================================
    def send_invite_email(self, to_email: str, invite_token: str, inviter_name: str = "An administrator") -> bool:
        """Synchronous email send (works with FastAPI BackgroundTasks)."""
        link = self.invitation_link(invite_token)

        if not self.enabled:
            # Development fallback (no SendGrid setup)
            logger.info("📨 [Mock Email] To: %s", to_email)
            logger.info("Invited by: %s | Link: %s", inviter_name, link)
            return True

        subject = "You've been invited to Freelance PM"
        html_content = f"""
        <div style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
            <h2>👋 Hello!</h2>
            <p><strong>{inviter_name}</strong> has invited you to manage clients,
            projects and time on <b>Freelance PM</b>.</p>

            <p style="text-align: center; margin: 20px 0;">
                <a href="{link}" style="
                    background-color: #4F46E5;
                    color: white;
                    padding: 12px 28px;
                    text-decoration: none;
                    border-radius: 6px;
                    font-weight: bold;
                    display: inline-block;
                ">Set your password</a>
            </p>

            <p>If the button doesn't work, copy and paste this link into your browser:</p>
            <p style="word-break: break-all; color: #555;">{link}</p>

            <p><small>This invitation will expire in {self.invite_expire_days} days.</small></p>
        </div>
        """

        try:
            message = Mail(
                from_email=self.sender_email,
                to_emails=to_email,
                subject=subject,
                html_content=html_content,
            )
            response = SendGridAPIClient(self.sendgrid_api_key).send(message)
            logger.info("✅ Invitation email sent to %s. Status: %s", to_email, response.status_code)
            return True
        except Exception as e:
            # Runs after the response went out; the invite itself is already committed
            logger.exception("❌ Failed to send invitation email to %s: %s", to_email, e)
            return False


# ============================================================
# ✅ Global instance for app-wide import
# ============================================================
email_service = EmailService()
