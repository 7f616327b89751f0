"""
Shared building blocks for the PDF and Excel documents staff download.

Invoices, payment receipts and reports all open with the same hotel header
and use the same two table looks: a dark-headed data table and an
amber-headed summary table.
"""
from django.conf import settings
from django.http import HttpResponse
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

ACCENT = '#C77A1A'
XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

DATA_TABLE_STYLE = TableStyle([
    ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#0F0F0F')),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
    ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('FONTSIZE', (0, 0), (-1, 0), 11),
    ('BOTTOMPADDING', (0, 0), (-1, 0), 10),
    ('BACKGROUND', (0, 1), (-1, -1), colors.beige),
    ('GRID', (0, 0), (-1, -1), 1, colors.black),
])

SUMMARY_TABLE_STYLE = TableStyle([
    ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor(ACCENT)),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
    ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('FONTSIZE', (0, 0), (-1, 0), 11),
    ('GRID', (0, 0), (-1, -1), 1, colors.black),
])


def attachment(content_type, filename):
    response = HttpResponse(content_type=content_type)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def pdf_document(response):
    return SimpleDocTemplate(
        response,
        pagesize=letter,
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
        topMargin=0.5 * inch,
        bottomMargin=0.75 * inch,
    )


def document_header(title, contact_lines=None, hotel_name=None):
    """
    Hotel name, contact lines and a document title, centred at the top of a page.

    Args:
        title: e.g. "Invoice INV-0042"
        contact_lines: address, phone and email lines from the hotel configuration
        hotel_name: overrides the configured back-office name

    Returns:
        list: flowables to start the document with
    """
    styles = getSampleStyleSheet()
    lines = [f'<b><font size="18">{hotel_name or settings.BACKOFFICE_HOTEL_NAME}</font></b>']
    lines.extend(f'<font size="11" color="#555555">{line}</font>' for line in contact_lines or [] if line)
    contact_style = ParagraphStyle(
        'Contact',
        parent=styles['Normal'],
        fontSize=11,
        textColor=colors.HexColor('#333333'),
        alignment=1,
        leading=16,
    )
    title_style = ParagraphStyle(
        'DocumentTitle',
        parent=styles['Heading1'],
        fontSize=18,
        textColor=colors.HexColor(ACCENT),
        spaceAfter=12,
    )
    divider = Table([['']], colWidths=[6.5 * inch])
    divider.setStyle(TableStyle([
        ('LINEBELOW', (0, 0), (-1, 0), 0.5, colors.HexColor('#DDDDDD')),
        ('TOPPADDING', (0, 0), (-1, -1), 0),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 0),
    ]))
    return [
        Paragraph('<br/>'.join(lines), contact_style),
        Spacer(1, 0.2 * inch),
        divider,
        Spacer(1, 0.2 * inch),
        Paragraph(title, title_style),
    ]


def data_table(rows, col_widths=None):
    table = Table(rows, colWidths=col_widths, repeatRows=1)
    table.setStyle(DATA_TABLE_STYLE)
    return table


def summary_table(rows, col_widths=None):
    table = Table(rows, colWidths=col_widths or [3 * inch, 2 * inch])
    table.setStyle(SUMMARY_TABLE_STYLE)
    return table


def write_sheet_header(ws, row, headers):
    header_fill = PatternFill(start_color='C77A1A', end_color='C77A1A', fill_type='solid')
    header_font = Font(bold=True, color='FFFFFF', size=12)
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col, value=header)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal='center')


def autosize_columns(ws):
    for column in ws.columns:
        max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        ws.column_dimensions[get_column_letter(column[0].column)].width = min(max_length + 2, 50)


def excel_response(wb, filename):
    response = attachment(XLSX_CONTENT_TYPE, filename)
    wb.save(response)
    return response
