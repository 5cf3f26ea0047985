"""
Texto do resumo do cadastro enviado no WhatsApp.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from intake.core.entities.submission import Submission, SubmissionData
from intake.infrastructure.rules.formatters import format_cep, format_cnpj, format_cpf, format_phone

SAO_PAULO = ZoneInfo("America/Sao_Paulo")


def display_tax_id(data: SubmissionData) -> tuple[str, str]:
    """(rótulo, valor) — CNPJ tem preferência sobre CPF."""
    if data.cnpj:
        return "CNPJ", format_cnpj(data.cnpj)
    if data.cpf:
        return "CPF", format_cpf(data.cpf)
    return "CPF/CNPJ", "Não informado"


def build_submission_message(
    submission: Submission, folder_url: str | None = None, now: datetime | None = None
) -> str:
    data = submission.data
    moment = (now or datetime.now(tz=SAO_PAULO)).astimezone(SAO_PAULO)
    tax_label, tax_value = display_tax_id(data)

    lines = [
        "🚨 *NOVO FORMULÁRIO PREENCHIDO!*",
        "",
        f"📅 *Data/Hora:* {moment.strftime('%d/%m/%Y %H:%M:%S')}",
        "",
        "👤 *Dados Pessoais:*",
        f"• Nome: {data.full_name}",
    ]
    if data.email:
        lines.append(f"• Email: {data.email}")
    lines.append(f"• Telefone: {format_phone(data.phone)}")
    lines.append(f"• {tax_label}: {tax_value}")
    if data.rg:
        lines.append(f"• RG: {data.rg}")
    if data.birth_date:
        lines.append(f"• Data Nascimento: {data.birth_date.strftime('%d/%m/%Y')}")

    lines += ["", f"📍 *Estado:* {data.state or 'Não informado'}"]
    if data.city:
        lines.append(f"• Cidade: {data.city}")
    if data.cep:
        lines.append(f"• CEP: {format_cep(data.cep)}")

    lines += [
        "",
        "🏦 *Dados Bancários:*",
        f"• Banco: {data.bank_name}",
        f"• Tipo de Conta: {data.account_type}",
        f"• Agência: {data.agency}",
        f"• Conta: {data.account}",
    ]
    if data.pix_key:
        lines.append(f"• Chave PIX: {data.pix_key}")

    lines.append("")
    if folder_url:
        lines += ["📁 *Documentos:*", f"🔗 *Pasta:* {folder_url}"]
    else:
        lines.append("⏳ Aguardando documentos")

    lines += ["", f"🆔 Cadastro #{submission.id}"]
    return "\n".join(lines)
