import html
from datetime import datetime
from email.message import EmailMessage
from email.utils import formataddr
from string import Template

from audit_form.core.settings import Settings
from audit_form.lib.schemas import AuditRequest

SUBJECT = "New SEO Audit Form Submission"
HEADING = "New SEO Audit Request"

_HTML = Template("""<!DOCTYPE html>
<html>
  <head>
    <style>
      body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
      .container { max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f9f9f9; }
      .header { background-color: #4a5568; color: white; padding: 20px; text-align: center; border-radius: 5px 5px 0 0; }
      .content { background-color: white; padding: 30px; border-radius: 0 0 5px 5px; }
      .field { margin-bottom: 20px; }
      .label { font-weight: bold; color: #4a5568; display: block; margin-bottom: 5px; }
      .value { color: #2d3748; padding: 10px; background-color: #edf2f7; border-radius: 4px; word-break: break-word; }
      .footer { margin-top: 20px; padding-top: 20px; border-top: 1px solid #e2e8f0; font-size: 12px; color: #718096; text-align: center; }
    </style>
  </head>
  <body>
    <div class="container">
      <div class="header">
        <h1>$heading</h1>
      </div>
      <div class="content">
$fields
      </div>
      <div class="footer">
        <p>This email was sent from your SEO Audit Form</p>
        <p>Submitted on $submitted_at</p>
      </div>
    </div>
  </body>
</html>
""")

_FIELD = Template("""        <div class="field">
          <span class="label">$label:</span>
          <div class="value">$value</div>
        </div>""")


def format_timestamp(moment: datetime) -> str:
    return moment.strftime("%d %b %Y, %H:%M:%S %Z").strip()


def render_html(req: AuditRequest, submitted_at: str) -> str:
    esc = html.escape
    blocks = [
        ("Name", esc(req.name)),
        ("Email", f'<a href="mailto:{esc(req.email)}">{esc(req.email)}</a>'),
        ("Phone Number", f"{esc(req.country_code)} {esc(req.phone)}"),
    ]
    if req.website:
        blocks.append(("Website URL", f'<a href="{esc(req.website)}" target="_blank">{esc(req.website)}</a>'))
    blocks.append(("Message", esc(req.message).replace("\n", "<br>")))

    fields = "\n\n".join(_FIELD.substitute(label=label, value=value) for label, value in blocks)
    return _HTML.substitute(heading=HEADING, fields=fields, submitted_at=esc(submitted_at))


def render_text(req: AuditRequest, submitted_at: str) -> str:
    lines = [
        HEADING,
        "",
        f"Name: {req.name}",
        f"Email: {req.email}",
        f"Phone: {req.country_code} {req.phone}",
    ]
    if req.website:
        lines.append(f"Website: {req.website}")
    lines += [
        f"Message: {req.message}",
        "",
        f"Submitted on {submitted_at}",
    ]
    return "\n".join(lines) + "\n"


def build_message(req: AuditRequest, settings: Settings, submitted_at: datetime) -> EmailMessage:
    """Assemble the notification mail for one validated request.

    The text part comes first; the HTML rendering is attached as the
    preferred alternative. Replies go straight to the submitter.
    """
    stamp = format_timestamp(submitted_at)

    msg = EmailMessage()
    msg["Subject"] = SUBJECT
    if settings.smtp_from:
        msg["From"] = formataddr((" ".join(req.name.split()), settings.smtp_from))
    if settings.smtp_to:
        msg["To"] = settings.smtp_to
    msg["Reply-To"] = req.email
    msg.set_content(render_text(req, stamp))
    msg.add_alternative(render_html(req, stamp), subtype="html")
    return msg
