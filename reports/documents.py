from openpyxl import Workbook
from openpyxl.styles import Font
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, Spacer

from core.documents import (
    ACCENT, attachment, autosize_columns, data_table, document_header, excel_response, pdf_document,
    summary_table, write_sheet_header,
)
from .services import booking_rows

BOOKING_HEADERS = ['Room', 'Confirmation', 'Guest', 'Check-in', 'Check-out', 'Status']
BOOKING_COL_WIDTHS = [0.9 * inch, 1.3 * inch, 1.8 * inch, 1.0 * inch, 1.0 * inch, 0.9 * inch]


def _filename(report, extension):
    return f"{report['mode']}_report_{report['start_date']}_{report['end_date']}.{extension}"


def _breakdown_rows(title, rows):
    return [[title, 'Count', 'Amount']] + [
        [str(label).replace('_', ' ').capitalize(), str(count), '' if amount is None else str(amount)]
        for label, count, amount in rows
    ]


def generate_pdf_report(report, contact_lines=None):
    """PDF version of a statistics report built by reports.services.build_report."""
    response = attachment('application/pdf', _filename(report, 'pdf'))
    doc = pdf_document(response)
    styles = getSampleStyleSheet()

    elements = document_header(f"{report['mode_label']} Report - {report['date_label']}", contact_lines)
    elements.append(Paragraph(f"<b>Report type:</b> {report['mode_label']}", styles['Normal']))
    elements.append(Paragraph(f"<b>Period:</b> {report['date_label']}", styles['Normal']))
    elements.append(Spacer(1, 0.2 * inch))

    elements.append(summary_table([['Summary', '']] + [list(row) for row in report['summary']]))
    elements.append(Spacer(1, 0.3 * inch))

    for title, rows in (('Bookings by status', report['by_status']),
                        ('Bookings by source', report['by_source']),
                        ('Payments by method', report['by_method'])):
        if rows:
            elements.append(summary_table(_breakdown_rows(title, rows), [2.5 * inch, 1.2 * inch, 1.5 * inch]))
            elements.append(Spacer(1, 0.2 * inch))

    if report['bookings']:
        elements.append(Paragraph('<b>Booking Information</b>', styles['Heading2']))
        elements.append(data_table([BOOKING_HEADERS] + booking_rows(report['bookings']), BOOKING_COL_WIDTHS))

    doc.build(elements)
    return response


def generate_excel_report(report):
    """Excel version of a statistics report: summary, breakdowns and bookings on one sheet."""
    wb = Workbook()
    ws = wb.active
    ws.title = f"{report['mode_label']} Report"[:31]

    ws['A1'] = f"{report['mode_label']} Report - {report['date_label']}"
    ws['A1'].font = Font(bold=True, size=14, color=ACCENT.lstrip('#'))
    ws.merge_cells('A1:F1')

    row = 3
    ws.cell(row=row, column=1, value='Summary').font = Font(bold=True, size=12)
    row += 1
    for label, value in report['summary']:
        ws.cell(row=row, column=1, value=label).font = Font(bold=True)
        ws.cell(row=row, column=2, value=value)
        row += 1

    for title, rows in (('Bookings by status', report['by_status']),
                        ('Bookings by source', report['by_source']),
                        ('Payments by method', report['by_method'])):
        if not rows:
            continue
        row += 1
        write_sheet_header(ws, row, [title, 'Count', 'Amount'])
        row += 1
        for label, count, amount in rows:
            ws.cell(row=row, column=1, value=str(label))
            ws.cell(row=row, column=2, value=count)
            ws.cell(row=row, column=3, value=amount)
            row += 1

    row += 1
    ws.cell(row=row, column=1, value='Bookings').font = Font(bold=True, size=12)
    row += 1
    write_sheet_header(ws, row, BOOKING_HEADERS)
    row += 1
    for values in booking_rows(report['bookings']):
        for col, value in enumerate(values, 1):
            ws.cell(row=row, column=col, value=value)
        row += 1

    autosize_columns(ws)
    return excel_response(wb, _filename(report, 'xlsx'))
