from django.shortcuts import render

from configuration.services import contact_lines
from core.decorators import api_login_required
from . import services
from .documents import generate_excel_report, generate_pdf_report


@api_login_required
def stats_report(request):
    """
    Booking, invoice and payment figures for a period, on screen or exported.

    mode:
      - daily  (default)
      - weekly (week containing the selected date, Mon-Sun)
      - monthly (calendar month of the selected date)
      - custom (explicit start_date/end_date)
    """
    mode, start_date, end_date = services.resolve_range(
        request.GET.get('mode', 'daily'),
        request.GET.get('date'),
        request.GET.get('start_date'),
        request.GET.get('end_date'),
    )
    report = services.build_report(request, mode, start_date, end_date)

    export_format = request.GET.get('export')
    if export_format == 'pdf':
        return generate_pdf_report(report, contact_lines(request))
    elif export_format == 'excel':
        return generate_excel_report(report)

    context = dict(report, modes=services.REPORT_MODES, anchor_date=request.GET.get('date') or start_date.isoformat())
    return render(request, 'reports/stats_report.html', context)
