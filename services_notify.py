# services_notify.py — outbound email (SMTP) and message templates
import smtplib
from email.mime.text import MIMEText
from flask import current_app

HEADER_HTML = """
  <div style="background: linear-gradient(135deg, #03809c 0%, #273f4f 100%); padding: 30px; border-radius: 10px; text-align: center;">
    <h1 style="color: white; margin: 0; font-size: 24px;">{title}</h1>
    <p style="color: white; margin: 10px 0 0 0; opacity: 0.9;">{subtitle}</p>
  </div>
"""


def smtp_configured() -> bool:
    cfg = current_app.config
    return bool(cfg.get("SMTP_HOST") and cfg.get("SMTP_USER") and cfg.get("SMTP_PASS"))


def send_email(to: str, subject: str, html: str) -> bool:
    """Send an HTML email. Returns False (never raises) when SMTP is missing or fails."""
    cfg = current_app.config
    if not (smtp_configured() and to):
        current_app.logger.warning("[MAIL] SMTP not configured; not sending '%s' to %s", subject, to or "-")
        return False
    from_email = cfg.get("MAIL_FROM") or cfg["SMTP_USER"]
    try:
        msg = MIMEText(html, "html", "utf-8")
        msg["Subject"] = subject
        msg["From"]    = from_email
        msg["To"]      = to
        with smtplib.SMTP(cfg["SMTP_HOST"], int(cfg.get("SMTP_PORT") or 587), timeout=10) as s:
            s.starttls()
            s.login(cfg["SMTP_USER"], cfg["SMTP_PASS"])
            s.sendmail(from_email, [to], msg.as_string())
        current_app.logger.info("[MAIL] sent '%s' to %s", subject, to)
        return True
    except (smtplib.SMTPException, OSError) as e:
        current_app.logger.warning("[MAIL] send failed to %s: %s", to, e)
        return False


def create_verification_email(to: str, code: str, ttl_min: int = 10) -> dict:
    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
{HEADER_HTML.format(title="KW Singapore", subtitle="Chief Media Platform")}
  <div style="background: white; padding: 30px; border-radius: 0 0 10px 10px;">
    <h2 style="color: #273f4f; margin: 0 0 20px 0;">Your Verification Code</h2>
    <p style="color: #666; line-height: 1.6;">
      Hello! You've requested to sign in to the Chief Media Platform using your company email.
    </p>
    <div style="background: #f8f9fa; border: 2px dashed #03809c; border-radius: 8px; padding: 20px; text-align: center;">
      <p style="margin: 0 0 10px 0; color: #666; font-size: 14px;">Your verification code is:</p>
      <div style="font-size: 32px; font-weight: bold; color: #03809c; letter-spacing: 8px; font-family: monospace;">{code}</div>
    </div>
    <p style="color: #666; line-height: 1.6;">
      This code will expire in {ttl_min} minutes. If you didn't request this code, please ignore this email.
    </p>
    <p style="color: #999; font-size: 12px;">
      This is an automated message from Chief Media Platform. Please do not reply to this email.
    </p>
  </div>
</div>
"""
    return {"to": to, "subject": "Your KW Singapore Verification Code", "html": html}
