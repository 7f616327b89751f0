from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, Spacer

from core.documents import attachment, document_header, pdf_document, summary_table
from core.formatting import format_currency, format_date

METHOD_LABELS = {
    'cardDetails': lambda d: f"{(d.get('cardType') or 'Card').title()} ending {d.get('last4', '****')}",
    'bankDetails': lambda d: f"{d.get('bankName', '')} {d.get('accountName', '')}".strip(),
    'mobileMoneyDetails': lambda d: f"{d.get('provider', '')} {d.get('phoneNumber', '')}".strip(),
    'onlinePaymentDetails': lambda d: f"{d.get('provider', '')} {d.get('paymentId', '')}".strip(),
}


def render_receipt_pdf(payment, contact_lines=None):
    """
    Payment receipt.

    Returns:
        HttpResponse: PDF attachment named after the receipt (or payment) number
    """
    number = payment.get('receiptNumber') or payment.get('paymentNumber') or payment.get('_id', 'payment')
    currency = payment.get('currency') or 'USD'
    response = attachment('application/pdf', f'receipt_{number}.pdf')
    doc = pdf_document(response)
    styles = getSampleStyleSheet()

    elements = document_header(f'Receipt {number}', contact_lines)
    guest = payment.get('guest') or {}
    elements.append(Paragraph(f"<b>Received from:</b> {guest.get('full_name', '')}", styles['Normal']))
    elements.append(Paragraph(f"<b>Date:</b> {format_date(payment.get('paidAt') or payment.get('createdAt'))}", styles['Normal']))
    invoice = payment.get('invoice') or {}
    if invoice.get('invoiceNumber'):
        elements.append(Paragraph(f"<b>Invoice:</b> {invoice['invoiceNumber']}", styles['Normal']))
    booking = payment.get('booking') or {}
    if booking.get('confirmation_number'):
        elements.append(Paragraph(f"<b>Booking:</b> {booking['confirmation_number']}", styles['Normal']))
    elements.append(Spacer(1, 0.25 * inch))

    method = (payment.get('method') or '').replace('_', ' ').title()
    rows = [['Payment', ''], ['Method', method]]
    for block, describe in METHOD_LABELS.items():
        if payment.get(block):
            rows.append(['Details', describe(payment[block])])
    if payment.get('transactionReference'):
        rows.append(['Reference', payment['transactionReference']])
    rows.append(['Status', payment.get('status', '')])
    rows.append(['Amount paid', format_currency(payment.get('amountPaid'), currency)])
    refund = payment.get('refundDetails') or {}
    if refund.get('amount'):
        rows.append(['Refunded', format_currency(refund['amount'], currency)])
    elements.append(summary_table(rows))

    if payment.get('notes'):
        elements.append(Spacer(1, 0.2 * inch))
        elements.append(Paragraph(f"<b>Notes:</b> {payment['notes']}", styles['Normal']))
    elements.append(Spacer(1, 0.3 * inch))
    elements.append(Paragraph('Thank you for your payment.', styles['Italic']))

    doc.build(elements)
    return response
