"""
Export utilities for CSV and printable PDF generation.
"""
import csv
import io
import logging
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from .datetime_format import isoformat_utc

logger = logging.getLogger(__name__)

# Badge colours per category severity: (background, text)
SEVERITY_COLORS = {
    'normal': ('#c6f6d5', '#22543d'),
    'elevated': ('#fef5e7', '#744210'),
    'high': ('#fed7d7', '#742a2a'),
    'crisis': ('#feb2b2', '#742a2a'),
    'low': ('#bee3f8', '#2a4365'),
}

HEADER_COLOR = colors.HexColor('#667eea')


def generate_readings_csv(history):
    """Generate CSV export of blood pressure readings.

    Args:
        history: ReadingHistory holding the readings to export

    Returns:
        StringIO object containing CSV data
    """
    output = io.StringIO()

    fieldnames = [
        'id', 'date', 'time', 'day_of_week', 'upper_pressure', 'lower_pressure',
        'bp_category', 'pulse_rate', 'pulse_category', 'created_at'
    ]

    writer = csv.DictWriter(output, fieldnames=fieldnames)
    writer.writeheader()

    for reading, shown in history.rows():
        writer.writerow({
            'id': reading.id,
            'date': reading.reading_date.isoformat() if reading.reading_date else '',
            'time': reading.reading_time.strftime('%H:%M:%S') if reading.reading_time else '',
            'day_of_week': shown['weekday'],
            'upper_pressure': reading.systolic,
            'lower_pressure': reading.diastolic,
            'bp_category': shown['bloodPressure']['label'],
            'pulse_rate': reading.pulse,
            'pulse_category': shown['pulse']['label'],
            'created_at': isoformat_utc(reading.created_at) or '',
        })

    output.seek(0)
    return output


def generate_readings_pdf(history, printed_at):
    """Generate the printable A4 landscape record sheet.

    Args:
        history: ReadingHistory holding the readings to print
        printed_at: aware datetime shown in the footer

    Returns:
        BytesIO object containing PDF data
    """
    output = io.BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=landscape(A4),
        leftMargin=15*mm, rightMargin=15*mm, topMargin=15*mm, bottomMargin=15*mm,
        title='Blood Pressure Records',
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'RecordsTitle',
        parent=styles['Heading1'],
        fontSize=18,
        alignment=1,
        textColor=HEADER_COLOR,
        spaceAfter=10,
    )
    centered_style = ParagraphStyle(
        'Centered',
        parent=styles['Normal'],
        alignment=1,
    )
    footer_style = ParagraphStyle(
        'Footer',
        parent=styles['Normal'],
        fontSize=9,
        alignment=1,
        textColor=colors.HexColor('#666666'),
    )

    elements = [Paragraph('Blood Pressure &amp; Pulse Records', title_style)]

    date_range = history.date_range_label()
    if date_range:
        elements.append(Paragraph(f'<b>Date Range:</b> {date_range}', centered_style))
    elements.append(Spacer(1, 10))

    table_data = [[
        'Date', 'Time', 'Day of Week', 'Upper Pressure\n(mmHg)', 'Lower Pressure\n(mmHg)',
        'Blood Pressure\nStatus', 'Pulse Rate\n(bpm)', 'Pulse\nStatus',
    ]]
    badge_styles = []
    for row_index, (reading, shown) in enumerate(history.rows(), start=1):
        table_data.append([
            shown['date'],
            shown['time'],
            shown['weekday'],
            str(reading.systolic),
            str(reading.diastolic),
            shown['bloodPressure']['label'],
            str(reading.pulse),
            shown['pulse']['label'],
        ])
        for column, category in ((5, shown['bloodPressure']), (7, shown['pulse'])):
            background, text = SEVERITY_COLORS.get(category['severity'], ('#ffffff', '#333333'))
            badge_styles.append(('BACKGROUND', (column, row_index), (column, row_index), colors.HexColor(background)))
            badge_styles.append(('TEXTCOLOR', (column, row_index), (column, row_index), colors.HexColor(text)))

    reading_table = Table(table_data, repeatRows=1)
    reading_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f8fafc')]),
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#dddddd')),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
        ('TOPPADDING', (0, 0), (-1, -1), 5),
    ] + badge_styles))
    elements.append(reading_table)

    elements.append(Spacer(1, 15))
    elements.append(Paragraph(f"Printed on: {printed_at.strftime('%d/%m/%Y %H:%M:%S')}", footer_style))
    elements.append(Paragraph(f'Total Records: {len(history)}', footer_style))

    doc.build(elements)
    output.seek(0)
    logger.info('Built records PDF with %d readings', len(history))
    return output
