from reportlab.lib.units import inch
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, Spacer

from core.documents import attachment, data_table, document_header, pdf_document, summary_table
from core.formatting import format_currency, format_date
from .services import balance_due


def _bill_to(invoice):
    guest = invoice.get('guest') or {}
    lines = [f"<b>{guest.get('full_name', '')}</b>"]
    company = invoice.get('companyDetails') or {}
    if invoice.get('isCompanyBilling') and company.get('name'):
        lines.append(company['name'])
        if company.get('taxId'):
            lines.append(f"Tax ID: {company['taxId']}")
    address = invoice.get('billingAddress') or {}
    if address:
        lines.append(', '.join(filter(None, [address.get('line1'), address.get('line2'), address.get('city'),
                                             address.get('state'), address.get('postalCode'), address.get('country')])))
    lines.extend(filter(None, [guest.get('email'), guest.get('phone')]))
    return '<br/>'.join(lines)


def render_invoice_pdf(invoice, contact_lines=None):
    """
    Printable invoice.

    Args:
        invoice: invoice as the API returns it
        contact_lines: hotel address and contact details for the header

    Returns:
        HttpResponse: PDF attachment named after the invoice number
    """
    number = invoice.get('invoiceNumber') or invoice.get('_id', 'invoice')
    currency = invoice.get('currency') or 'USD'
    response = attachment('application/pdf', f'invoice_{number}.pdf')
    doc = pdf_document(response)
    styles = getSampleStyleSheet()

    elements = document_header(f'Invoice {number}', contact_lines)
    elements.append(Paragraph(f"<b>Status:</b> {invoice.get('status', '')}", styles['Normal']))
    elements.append(Paragraph(f"<b>Issued:</b> {format_date(invoice.get('issuedDate'))}", styles['Normal']))
    elements.append(Paragraph(f"<b>Due:</b> {format_date(invoice.get('dueDate'))}", styles['Normal']))
    booking = invoice.get('booking') or {}
    if booking.get('confirmation_number'):
        elements.append(Paragraph(
            f"<b>Booking:</b> {booking['confirmation_number']} "
            f"({format_date(booking.get('check_in'))} - {format_date(booking.get('check_out'))})",
            styles['Normal'],
        ))
    elements.append(Spacer(1, 0.2 * inch))
    elements.append(Paragraph('<b>Bill to</b>', styles['Heading3']))
    elements.append(Paragraph(_bill_to(invoice), styles['Normal']))
    elements.append(Spacer(1, 0.25 * inch))

    rows = [['Description', 'Qty', 'Unit price', 'Total']]
    for item in invoice.get('items') or []:
        rows.append([
            Paragraph(item.get('description', ''), styles['Normal']),
            str(item.get('quantity', '')),
            format_currency(item.get('unitPrice'), currency),
            format_currency(item.get('total'), currency),
        ])
    elements.append(data_table(rows, [3.4 * inch, 0.7 * inch, 1.2 * inch, 1.2 * inch]))
    elements.append(Spacer(1, 0.25 * inch))

    summary = [['Summary', ''], ['Subtotal', format_currency(invoice.get('subtotal'), currency)]]
    for tax in invoice.get('taxes') or []:
        summary.append([f"{tax.get('name')} ({tax.get('rate')}%)", format_currency(tax.get('amount'), currency)])
    for discount in invoice.get('discounts') or []:
        summary.append([f"Discount: {discount.get('name')}", f"-{format_currency(discount.get('amount'), currency)}"])
    summary.extend([
        ['Total', format_currency(invoice.get('total'), currency)],
        ['Paid', format_currency(invoice.get('amountPaid'), currency)],
        ['Balance due', format_currency(balance_due(invoice), currency)],
    ])
    elements.append(summary_table(summary))

    for label, key in (('Payment terms', 'paymentTerms'), ('Payment instructions', 'paymentInstructions'), ('Notes', 'notes')):
        if invoice.get(key):
            elements.append(Spacer(1, 0.15 * inch))
            elements.append(Paragraph(f'<b>{label}:</b> {invoice[key]}', styles['Normal']))

    doc.build(elements)
    return response
